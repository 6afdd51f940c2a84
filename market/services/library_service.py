# market/services/library_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from market.domain.errors import NotFoundError
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.repos.library_repo import LibraryRepo
from market.services.catalog_service import category_ref
from market.services.storage import BlobStorage
from market.utils.logging import get_logger

logger = get_logger(__name__)


class LibraryService:
    """
    Entitlement store. Ownership is permanent: rows are granted by
    checkout and never removed, and it is the only thing that authorizes
    a download.
    """

    def __init__(self, db: Session, storage: BlobStorage | None = None):
        self.repo = LibraryRepo(db)
        self.storage = storage or BlobStorage()

    def has_entitlement(self, user_id: int, book_id: int) -> bool:
        return self.repo.has_entry(user_id, book_id)

    def grant_entitlement(self, user_id: int, book_id: int) -> bool:
        """Insert-or-ignore. Does not commit; the caller owns the transaction."""
        created = self.repo.grant(user_id, book_id)
        if not created:
            logger.info(f"User {user_id} already owns book {book_id}, grant skipped")
        return created

    def list_entitlements(self, principal: Principal, page: PageRequest) -> Dict[str, Any]:
        entries = self.repo.list_entries(principal.user_id, page.offset, page.limit)
        total = self.repo.count_entries(principal.user_id)

        return {
            "books": [
                {
                    "purchased_at": entry.purchased_at,
                    "book": {
                        "id": entry.book.id,
                        "title": entry.book.title,
                        "description": entry.book.description,
                        "author": entry.book.author,
                        "cover_image_url": entry.book.cover_image_url,
                        "file_type": entry.book.file_type,
                        "file_format": entry.book.file_format,
                        "file_size": entry.book.file_size,
                        "duration": entry.book.duration,
                        "rating": entry.book.rating,
                        "reviews_count": entry.book.reviews_count,
                        "category": category_ref(entry.book.category),
                    },
                }
                for entry in entries
            ],
            "pagination": page.meta(total),
        }

    def download_link(self, principal: Principal, book_id: int) -> Dict[str, Any]:
        entry = self.repo.get_entry(principal.user_id, book_id)
        if not entry:
            raise NotFoundError("Book not found in your library")

        url, expires_at = self.storage.download_link(entry.book.file_url)
        logger.info(f"Download link issued to user {principal.user_id} for book {book_id}")
        return {
            "download_url": url,
            "title": entry.book.title,
            "format": entry.book.file_format,
            "expires_at": expires_at,
        }

    def reading_progress(self, principal: Principal, book_id: int) -> Dict[str, Any]:
        if not self.has_entitlement(principal.user_id, book_id):
            raise NotFoundError("Book not found in your library")
        # TODO: persist reading position once the reader app reports it
        return {
            "book_id": book_id,
            "progress": 0,
            "last_read_at": None,
            "current_page": 0,
            "total_pages": 100,
        }
