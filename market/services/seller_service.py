# market/services/seller_service.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from market.data.models.book import BookModel
from market.domain.enums import BookStatus
from market.domain.errors import ConflictError, NotFoundError, ValidationError
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.domain.schemas import BookCreateIn, BookUpdateIn
from market.repos.book_repo import BookRepo
from market.repos.category_repo import CategoryRepo
from market.services.storage import BlobStorage
from market.utils.logging import get_logger

logger = get_logger(__name__)


class SellerService:
    """Catalog management for sellers. Every book op is scoped to the caller's own books."""

    def __init__(self, db: Session, storage: BlobStorage | None = None):
        self.repo = BookRepo(db)
        self.categories = CategoryRepo(db)
        self.storage = storage or BlobStorage()

    def _own_book(self, principal: Principal, book_id: int) -> BookModel:
        book = self.repo.get_for_seller(book_id, principal.user_id)
        if not book:
            raise NotFoundError("Book not found or access denied")
        return book

    def _check_category(self, category_id: int) -> None:
        if not self.categories.get_category(category_id):
            raise ValidationError("Valid category is required", details={"categoryId": category_id})

    def dashboard(self, principal: Principal) -> Dict[str, Any]:
        return {
            "stats": self.repo.seller_stats(principal.user_id),
            "recent_orders": self.repo.recent_sales(principal.user_id, limit=10),
        }

    def list_books(self, principal: Principal, page: PageRequest) -> Dict[str, Any]:
        books, total = self.repo.list_for_seller(principal.user_id, page.offset, page.limit)
        return {
            "books": [
                {
                    "id": b.id,
                    "title": b.title,
                    "author": b.author,
                    "price": b.price,
                    "status": b.status,
                    "is_featured": b.is_featured,
                    "downloads_count": b.downloads_count,
                    "rating": b.rating,
                    "reviews_count": b.reviews_count,
                    "created_at": b.created_at,
                    "category_name": b.category.name if b.category else None,
                }
                for b in books
            ],
            "pagination": page.meta(total),
        }

    def create_book(self, principal: Principal, payload: BookCreateIn) -> Dict[str, Any]:
        self._check_category(payload.category_id)

        # uploads are handled elsewhere; reserve blob locations for now
        file_url, cover_url = self.storage.placeholder_urls(payload.file_format)

        book = self.repo.add_book(
            BookModel(
                seller_id=principal.user_id,
                category_id=payload.category_id,
                title=payload.title,
                description=payload.description,
                author=payload.author,
                price=payload.price,
                original_price=payload.original_price,
                file_type=payload.file_type.value,
                file_format=payload.file_format,
                duration=payload.duration,
                file_url=file_url,
                cover_image_url=cover_url,
                status=BookStatus.DRAFT.value,
            )
        )
        self.repo.commit()

        logger.info(f"Seller {principal.user_id} created book {book.id}")
        return {"message": "Book created successfully", "book_id": book.id}

    def update_book(self, principal: Principal, book_id: int, payload: BookUpdateIn) -> Dict[str, Any]:
        changes = payload.model_dump(exclude_none=True)
        if not changes:
            raise ValidationError("No valid fields to update")

        book = self._own_book(principal, book_id)
        if "category_id" in changes:
            self._check_category(changes["category_id"])

        for field, value in changes.items():
            setattr(book, field, value)
        book.updated_at = datetime.now(timezone.utc)
        self.repo.commit()

        # prices already captured on order lines are not affected
        logger.info(f"Seller {principal.user_id} updated book {book_id}: {sorted(changes)}")
        return {"message": "Book updated successfully"}

    def set_status(self, principal: Principal, book_id: int, status: BookStatus) -> Dict[str, Any]:
        book = self._own_book(principal, book_id)
        book.status = status.value
        book.updated_at = datetime.now(timezone.utc)
        self.repo.commit()

        verb = "published" if status == BookStatus.PUBLISHED else "unpublished"
        logger.info(f"Seller {principal.user_id} {verb} book {book_id}")
        return {"message": f"Book {verb} successfully"}

    def delete_book(self, principal: Principal, book_id: int) -> Dict[str, Any]:
        self._own_book(principal, book_id)

        sales = self.repo.sales_count(book_id)
        if sales > 0:
            raise ConflictError(
                "Cannot delete book that has been sold. You can unpublish it instead.",
                code="BOOK_HAS_SALES",
                details={"bookId": book_id, "salesCount": sales},
            )

        self.repo.delete_book(book_id)
        self.repo.commit()

        logger.info(f"Seller {principal.user_id} deleted book {book_id}")
        return {"message": "Book deleted successfully"}
