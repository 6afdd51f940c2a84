# market/repos/cart_repo.py
from sqlalchemy import delete, select
from sqlalchemy.orm import Session, joinedload

from market.data.models.book import BookModel
from market.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_item(self, user_id: int, book_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.book_id == book_id,
            )
        ).scalar_one_or_none()

    def get_cart_items(self, user_id: int) -> list[CartItemModel]:
        """Entries with their current book row, newest first."""
        return list(
            self.db.execute(
                select(CartItemModel)
                .join(BookModel, CartItemModel.book_id == BookModel.id)
                .options(joinedload(CartItemModel.book).joinedload(BookModel.category))
                .where(CartItemModel.user_id == user_id)
                .order_by(CartItemModel.created_at.desc(), CartItemModel.id.desc())
            ).scalars().all()
        )

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, user_id: int, cart_item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.id == cart_item_id,
                CartItemModel.user_id == user_id,
            )
        )
        return result.rowcount

    def delete_cart_book(self, user_id: int, book_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.book_id == book_id,
                CartItemModel.user_id == user_id,
            )
        )
        return result.rowcount

    def delete_cart_books(self, user_id: int, book_ids: list[int]) -> int:
        if not book_ids:
            return 0
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.user_id == user_id,
                CartItemModel.book_id.in_(book_ids),
            )
        )
        return result.rowcount

    def clear_cart(self, user_id: int) -> int:
        result = self.db.execute(delete(CartItemModel).where(CartItemModel.user_id == user_id))
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
