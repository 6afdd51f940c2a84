# market/services/catalog_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.orm import Session

from market.data.models.book import BookModel
from market.data.models.category import CategoryModel
from market.domain.errors import NotFoundError, ValidationError
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.repos.book_repo import SORT_COLUMNS, BookRepo
from market.repos.category_repo import CategoryRepo
from market.repos.library_repo import LibraryRepo


def category_ref(category: CategoryModel | None) -> Dict[str, Any]:
    return {
        "name": category.name if category else None,
        "name_en": category.name_en if category else None,
    }


def book_summary(book: BookModel) -> Dict[str, Any]:
    return {
        "id": book.id,
        "title": book.title,
        "description": book.description,
        "author": book.author,
        "price": book.price,
        "original_price": book.original_price,
        "cover_image_url": book.cover_image_url,
        "file_type": book.file_type,
        "file_format": book.file_format,
        "duration": book.duration,
        "is_featured": book.is_featured,
        "downloads_count": book.downloads_count,
        "rating": book.rating,
        "reviews_count": book.reviews_count,
        "created_at": book.created_at,
        "category": category_ref(book.category),
        "seller": {
            "first_name": book.seller.first_name,
            "last_name": book.seller.last_name,
        } if book.seller else None,
    }


def category_dict(category: CategoryModel, book_count: int) -> Dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "name_en": category.name_en,
        "description": category.description,
        "icon": category.icon,
        "gradient": category.gradient,
        "book_count": book_count or 0,
    }


class CatalogService:
    """Read side of the catalog: published books and the category taxonomy."""

    def __init__(self, db: Session):
        self.books = BookRepo(db)
        self.categories = CategoryRepo(db)
        self.library = LibraryRepo(db)

    def list_books(
        self,
        page: PageRequest,
        *,
        q: str | None = None,
        category: str | None = None,
        min_price: Decimal | None = None,
        max_price: Decimal | None = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> Dict[str, Any]:
        if sort_by not in SORT_COLUMNS:
            raise ValidationError("Invalid sort field", details={"sortBy": sort_by})
        if sort_order not in ("asc", "desc"):
            raise ValidationError("Invalid sort order", details={"sortOrder": sort_order})
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationError("minPrice must not exceed maxPrice")

        books, total = self.books.search_published(
            q=q,
            category=category,
            min_price=min_price,
            max_price=max_price,
            sort_by=sort_by,
            sort_order=sort_order,
            offset=page.offset,
            limit=page.limit,
        )
        return {
            "books": [book_summary(b) for b in books],
            "pagination": page.meta(total),
        }

    def featured_books(self) -> Dict[str, Any]:
        return {"books": [book_summary(b) for b in self.books.featured(limit=8)]}

    def get_book(self, book_id: int, principal: Principal | None = None) -> Dict[str, Any]:
        book = self.books.get_published(book_id)
        if not book:
            raise NotFoundError("Book not found")

        is_owned = bool(principal) and self.library.has_entry(principal.user_id, book_id)

        detail = book_summary(book)
        detail["file_size"] = book.file_size
        detail["is_owned"] = is_owned
        return {"book": detail}

    def list_categories(self) -> Dict[str, Any]:
        return {
            "categories": [
                category_dict(category, count)
                for category, count in self.categories.list_with_counts()
            ]
        }

    def get_category(self, category_id: int) -> Dict[str, Any]:
        found = self.categories.get_with_count(category_id)
        if not found:
            raise NotFoundError("Category not found")
        category, count = found
        return {"category": category_dict(category, count)}
