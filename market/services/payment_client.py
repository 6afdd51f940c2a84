# market/services/payment_client.py
"""
Payment step of checkout.

The default gateway simulates an immediate approval. When
``PAYMENT_GATEWAY_URL`` is configured the charge goes over HTTP with a
timeout and bounded retries on transport errors; nothing is granted
until the gateway answers with an approval.
"""
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

import requests
from requests import RequestException

from market.utils.retry import http_retry
from market.utils.settings import PAYMENT_CURRENCY, PAYMENT_GATEWAY_URL, PAYMENT_TIMEOUT_SECONDS
from market.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    reference: str | None = None
    message: str | None = None


class PaymentGateway(Protocol):
    def charge(self, order_id: int, amount: Decimal, method: str) -> PaymentResult: ...


class SimulatedPaymentGateway:
    def __init__(self, declined_methods: Iterable[str] = ()):
        self.declined_methods = frozenset(declined_methods)

    def charge(self, order_id: int, amount: Decimal, method: str) -> PaymentResult:
        if method in self.declined_methods:
            logger.info(f"Simulated payment declined for order {order_id} ({method})")
            return PaymentResult(success=False, message=f"Payment method {method} was declined")

        reference = f"sim_{int(time.time() * 1000)}"
        logger.info(f"Simulated payment {reference} approved for order {order_id}, amount {amount}")
        return PaymentResult(success=True, reference=reference)


class HttpPaymentGateway:
    def __init__(self, base_url: str | None = None, timeout: float = PAYMENT_TIMEOUT_SECONDS):
        self.base_url = (base_url or PAYMENT_GATEWAY_URL).rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _post_charge(self, payload: dict) -> requests.Response:
        url = f"{self.base_url}/charges"
        logger.info(f"PaymentGateway POST {url} order={payload['orderId']}")
        resp = requests.post(
            url,
            json=payload,
            headers={"Idempotency-Key": f"order-{payload['orderId']}"},
            timeout=self.timeout,
        )
        if resp.status_code >= 500:
            # retried, then surfaced as a failed payment
            resp.raise_for_status()
        return resp

    def charge(self, order_id: int, amount: Decimal, method: str) -> PaymentResult:
        payload = {
            "orderId": order_id,
            "amount": str(amount),
            "currency": PAYMENT_CURRENCY,
            "method": method,
        }
        try:
            resp = self._post_charge(payload)
        except RequestException as e:
            logger.error(f"Payment gateway unreachable for order {order_id}: {e}")
            return PaymentResult(success=False, message="Payment gateway unavailable")

        body = resp.json() if resp.content else {}
        reference = body.get("reference")
        if resp.status_code == 200 and body.get("status") == "approved" and reference:
            return PaymentResult(success=True, reference=reference)

        logger.info(f"Payment declined for order {order_id}: HTTP {resp.status_code} {body}")
        return PaymentResult(success=False, message=body.get("message") or "Payment was declined")


def default_payment_gateway() -> PaymentGateway:
    if PAYMENT_GATEWAY_URL:
        return HttpPaymentGateway()
    return SimulatedPaymentGateway()
