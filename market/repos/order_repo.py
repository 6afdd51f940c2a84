# market/repos/order_repo.py
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from market.data.models.order import OrderModel
from market.data.models.order_item import OrderItemModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_user_order(self, order_id: int, user_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items).selectinload(OrderItemModel.book))
            .where(OrderModel.id == order_id, OrderModel.user_id == user_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_user_orders(self, user_id: int, offset: int, limit: int) -> list[tuple[OrderModel, int]]:
        rows = self.db.execute(
            select(OrderModel, func.count(OrderItemModel.id))
            .outerjoin(OrderItemModel, OrderItemModel.order_id == OrderModel.id)
            .where(OrderModel.user_id == user_id)
            .group_by(OrderModel.id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return [(row[0], row[1]) for row in rows]

    def count_user_orders(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(OrderModel.id)).where(OrderModel.user_id == user_id)
        ).scalar_one()

    def update_order_status(self, order: OrderModel, status: str, payment_id: str | None = None) -> OrderModel:
        order.status = status
        if payment_id is not None:
            order.payment_id = payment_id
        order.updated_at = datetime.now(timezone.utc)
        self.db.flush()
        return order

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
