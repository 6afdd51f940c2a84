# market/api/deps.py
from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from market.data.database import get_db
from market.domain.enums import Role
from market.domain.errors import AuthenticationError, AuthorizationError
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.services.lock_service import LockService
from market.services.order_service import OrderService
from market.services.payment_client import PaymentGateway, default_payment_gateway
from market.utils.security import decode_access_token, extract_bearer_token
from market.utils.settings import DEFAULT_PAGE_SIZE


def get_current_principal(authorization: str | None = Header(None)) -> Principal:
    token = extract_bearer_token(authorization)
    if not token:
        raise AuthenticationError("Authorization token required", code="TOKEN_REQUIRED")

    principal = decode_access_token(token)
    if principal is None:
        raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN")
    return principal


def get_optional_principal(authorization: str | None = Header(None)) -> Principal | None:
    token = extract_bearer_token(authorization)
    if not token:
        return None
    return decode_access_token(token)


def require_role(*roles: Role):
    """Capability check, evaluated once per request."""

    def _check(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.has_role(*roles):
            raise AuthorizationError("Insufficient permissions")
        return principal

    return _check


def page_params(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1),
) -> PageRequest:
    return PageRequest(page=page, limit=limit)


def get_payment_gateway() -> PaymentGateway:
    return default_payment_gateway()


def get_lock_service() -> LockService:
    return LockService()


def get_order_service(
    db: Session = Depends(get_db),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(db=db, payment_gateway=payment_gateway, lock_service=lock_service)
