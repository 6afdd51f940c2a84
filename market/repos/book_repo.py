# market/repos/book_repo.py
from decimal import Decimal

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session, joinedload

from market.data.models.book import BookModel
from market.data.models.cart_item import CartItemModel
from market.data.models.category import CategoryModel
from market.data.models.order import OrderModel
from market.data.models.order_item import OrderItemModel
from market.data.models.user import UserModel
from market.domain.enums import BookStatus, OrderStatus

SORT_COLUMNS = {
    "title": BookModel.title,
    "price": BookModel.price,
    "rating": BookModel.rating,
    "created_at": BookModel.created_at,
}


class BookRepo:
    def __init__(self, db: Session):
        self.db = db

    # reads

    def get_book(self, book_id: int) -> BookModel | None:
        return self.db.get(BookModel, book_id)

    def get_published(self, book_id: int) -> BookModel | None:
        return self.db.execute(
            select(BookModel)
            .options(joinedload(BookModel.category), joinedload(BookModel.seller))
            .where(BookModel.id == book_id, BookModel.status == BookStatus.PUBLISHED.value)
        ).scalar_one_or_none()

    def get_for_seller(self, book_id: int, seller_id: int) -> BookModel | None:
        return self.db.execute(
            select(BookModel).where(BookModel.id == book_id, BookModel.seller_id == seller_id)
        ).scalar_one_or_none()

    def search_published(
        self,
        *,
        q: str | None,
        category: str | None,
        min_price: Decimal | None,
        max_price: Decimal | None,
        sort_by: str,
        sort_order: str,
        offset: int,
        limit: int,
    ) -> tuple[list[BookModel], int]:
        conditions = [BookModel.status == BookStatus.PUBLISHED.value]
        if q:
            term = f"%{q}%"
            conditions.append(
                or_(
                    BookModel.title.ilike(term),
                    BookModel.author.ilike(term),
                    BookModel.description.ilike(term),
                )
            )
        if category:
            conditions.append(CategoryModel.name_en == category)
        if min_price is not None:
            conditions.append(BookModel.price >= min_price)
        if max_price is not None:
            conditions.append(BookModel.price <= max_price)

        column = SORT_COLUMNS[sort_by]
        ordering = column.asc() if sort_order == "asc" else column.desc()

        stmt = (
            select(BookModel)
            .outerjoin(CategoryModel, BookModel.category_id == CategoryModel.id)
            .options(joinedload(BookModel.category), joinedload(BookModel.seller))
            .where(*conditions)
            .order_by(ordering, BookModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        books = list(self.db.execute(stmt).scalars().all())

        total = self.db.execute(
            select(func.count(BookModel.id))
            .outerjoin(CategoryModel, BookModel.category_id == CategoryModel.id)
            .where(*conditions)
        ).scalar_one()
        return books, total

    def featured(self, limit: int = 8) -> list[BookModel]:
        return list(
            self.db.execute(
                select(BookModel)
                .options(joinedload(BookModel.category))
                .where(
                    BookModel.status == BookStatus.PUBLISHED.value,
                    BookModel.is_featured.is_(True),
                )
                .order_by(BookModel.created_at.desc(), BookModel.id.desc())
                .limit(limit)
            ).scalars().all()
        )

    def list_for_seller(self, seller_id: int, offset: int, limit: int) -> tuple[list[BookModel], int]:
        books = list(
            self.db.execute(
                select(BookModel)
                .options(joinedload(BookModel.category))
                .where(BookModel.seller_id == seller_id)
                .order_by(BookModel.created_at.desc(), BookModel.id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars().all()
        )
        total = self.db.execute(
            select(func.count(BookModel.id)).where(BookModel.seller_id == seller_id)
        ).scalar_one()
        return books, total

    def sales_count(self, book_id: int) -> int:
        """Order lines referencing the book, whatever the order status."""
        return self.db.execute(
            select(func.count(OrderItemModel.id)).where(OrderItemModel.book_id == book_id)
        ).scalar_one()

    def seller_stats(self, seller_id: int) -> dict:
        total_books = self.db.execute(
            select(func.count(BookModel.id)).where(BookModel.seller_id == seller_id)
        ).scalar_one()

        total_sales, total_revenue = self.db.execute(
            select(func.count(OrderItemModel.id), func.coalesce(func.sum(OrderItemModel.price), 0))
            .join(BookModel, OrderItemModel.book_id == BookModel.id)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .where(
                BookModel.seller_id == seller_id,
                OrderModel.status == OrderStatus.COMPLETED.value,
            )
        ).one()

        return {
            "total_books": total_books,
            "total_sales": total_sales,
            "total_revenue": Decimal(str(total_revenue)),
        }

    def recent_sales(self, seller_id: int, limit: int = 10) -> list[dict]:
        rows = self.db.execute(
            select(
                OrderModel.id,
                OrderModel.created_at,
                OrderItemModel.price,
                BookModel.title,
                UserModel.first_name,
                UserModel.last_name,
            )
            .join(BookModel, OrderItemModel.book_id == BookModel.id)
            .join(OrderModel, OrderItemModel.order_id == OrderModel.id)
            .join(UserModel, OrderModel.user_id == UserModel.id)
            .where(
                BookModel.seller_id == seller_id,
                OrderModel.status == OrderStatus.COMPLETED.value,
            )
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(limit)
        ).all()

        return [
            {
                "order_id": r[0],
                "created_at": r[1],
                "price": r[2],
                "book_title": r[3],
                "buyer_name": f"{r[4]} {r[5]}",
            }
            for r in rows
        ]

    # writes

    def add_book(self, book: BookModel) -> BookModel:
        self.db.add(book)
        self.db.flush()
        return book

    def increment_downloads(self, book_id: int) -> None:
        # single UPDATE, no read-modify-write
        self.db.execute(
            update(BookModel)
            .where(BookModel.id == book_id)
            .values(downloads_count=BookModel.downloads_count + 1)
        )

    def delete_book(self, book_id: int) -> int:
        self.db.execute(delete(CartItemModel).where(CartItemModel.book_id == book_id))
        result = self.db.execute(delete(BookModel).where(BookModel.id == book_id))
        return result.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
