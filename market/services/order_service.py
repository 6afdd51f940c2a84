# market/services/order_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from market.data.models.order import OrderModel
from market.data.models.order_item import OrderItemModel
from market.domain.enums import BookStatus, OrderStatus
from market.domain.errors import (
    EmptyCartError,
    InternalError,
    ItemUnavailableError,
    NotFoundError,
    PaymentFailedError,
)
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.repos.book_repo import BookRepo
from market.repos.cart_repo import CartRepo
from market.repos.order_repo import OrderRepo
from market.services.library_service import LibraryService
from market.services.lock_service import LockService
from market.services.notification_service import NotificationService
from market.services.payment_client import PaymentGateway, PaymentResult
from market.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    """A cart entry as captured at checkout time."""

    book_id: int
    price: Decimal
    title: str


def order_dict(order: OrderModel) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "total_amount": order.total_amount,
        "status": order.status,
        "payment_method": order.payment_method,
        "payment_id": order.payment_id,
        "created_at": order.created_at,
        "items": [
            {
                "book_id": line.book_id,
                "title": line.book.title,
                "author": line.book.author,
                "price": line.price,
                "cover_image_url": line.book.cover_image_url,
                "file_type": line.book.file_type,
            }
            for line in order.items
        ],
    }


class OrderService:
    """
    Order ledger and the checkout use case.

    Checkout turns the caller's cart into an order, takes payment, grants
    library entitlements, bumps download counters and removes the bought
    entries from the cart. Entitlements exist if and only if the order
    reaches ``completed``.
    """

    def __init__(
        self,
        db: Session,
        payment_gateway: PaymentGateway,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart = CartRepo(db)
        self.books = BookRepo(db)
        self.library = LibraryService(db)
        self.payment_gateway = payment_gateway
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    # =====================================================
    # COMMANDS
    # =====================================================
    def checkout(self, principal: Principal, payment_method: str) -> Dict[str, Any]:
        with self.lock_service.checkout_guard(principal.user_id):
            order = self._checkout(principal, payment_method)

        self.notification_service.send_purchase_receipt(principal.user_id, order["id"])
        return order

    def _checkout(self, principal: Principal, payment_method: str) -> Dict[str, Any]:
        user_id = principal.user_id

        # 1. snapshot + validation, nothing written yet
        lines = self._snapshot_cart(user_id)

        # 2-4. pending order with prices frozen from the snapshot
        total = sum((line.price for line in lines), Decimal("0.00"))
        order = self.repo.create_order(
            OrderModel(
                user_id=user_id,
                status=OrderStatus.PENDING.value,
                total_amount=total,
                payment_method=payment_method,
            )
        )
        for line in lines:
            self.repo.add_order_item(
                OrderItemModel(order_id=order.id, book_id=line.book_id, price=line.price)
            )
        logger.info(f"Order {order.id} pending for user {user_id}: {len(lines)} items, total {total}")

        # 5. payment
        payment = self._charge(order.id, total, payment_method)
        if not payment.success:
            self.repo.update_order_status(order, OrderStatus.CANCELLED.value)
            self.repo.commit()
            logger.info(f"Order {order.id} cancelled: {payment.message}")
            raise PaymentFailedError(
                payment.message or "Payment failed",
                details={"orderId": order.id},
            )

        # 6-7. fulfilment, all or nothing on top of the recorded order
        try:
            with self.db.begin_nested():
                self.repo.update_order_status(order, OrderStatus.COMPLETED.value, payment_id=payment.reference)
                for line in lines:
                    self.library.grant_entitlement(user_id, line.book_id)
                    self.books.increment_downloads(line.book_id)
                # only what was bought; entries added meanwhile stay
                self.cart.delete_cart_books(user_id, [line.book_id for line in lines])
        except Exception:
            logger.exception(
                f"Fulfilment failed for order {order.id} after payment {payment.reference}, cancelling"
            )
            self.repo.update_order_status(order, OrderStatus.CANCELLED.value, payment_id=payment.reference)
            self.repo.commit()
            raise InternalError("Checkout failed", details={"orderId": order.id})

        self.repo.commit()
        logger.info(f"Order {order.id} completed for user {user_id}, payment {payment.reference}")

        # 8.
        return order_dict(self.repo.get_user_order(order.id, user_id))

    def _snapshot_cart(self, user_id: int) -> List[CartLine]:
        items = self._cart_items(user_id)
        if not items:
            raise EmptyCartError("Cart is empty")

        for item in items:
            if item.book.status != BookStatus.PUBLISHED.value:
                raise ItemUnavailableError(
                    f"'{item.book.title}' is no longer available",
                    details={"bookId": item.book_id, "title": item.book.title},
                )

        return [
            CartLine(book_id=item.book_id, price=item.book.price, title=item.book.title)
            for item in items
        ]

    def _cart_items(self, user_id: int):
        # oldest entry first so order lines follow the cart
        return sorted(self.cart.get_cart_items(user_id), key=lambda item: item.id)

    def _charge(self, order_id: int, amount: Decimal, method: str) -> PaymentResult:
        try:
            return self.payment_gateway.charge(order_id, amount, method)
        except Exception:
            # an unattempted payment counts as a failed one
            logger.exception(f"Payment step raised for order {order_id}")
            return PaymentResult(success=False, message="Payment could not be processed")

    # =====================================================
    # QUERIES
    # =====================================================
    def get_order(self, principal: Principal, order_id: int) -> Dict[str, Any]:
        order = self.repo.get_user_order(order_id, principal.user_id)
        if not order:
            # other users' orders look missing too
            raise NotFoundError("Order not found")
        return {"order": order_dict(order)}

    def list_orders(self, principal: Principal, page: PageRequest) -> Dict[str, Any]:
        rows = self.repo.list_user_orders(principal.user_id, page.offset, page.limit)
        total = self.repo.count_user_orders(principal.user_id)

        return {
            "orders": [
                {
                    "id": order.id,
                    "total_amount": order.total_amount,
                    "status": order.status,
                    "payment_method": order.payment_method,
                    "item_count": item_count,
                    "created_at": order.created_at,
                }
                for order, item_count in rows
            ],
            "pagination": page.meta(total),
        }
