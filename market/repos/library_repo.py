# market/repos/library_repo.py
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, joinedload

from market.data.models.book import BookModel
from market.data.models.library_entry import LibraryEntryModel

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class LibraryRepo:
    def __init__(self, db: Session):
        self.db = db

    def has_entry(self, user_id: int, book_id: int) -> bool:
        found = self.db.execute(
            select(LibraryEntryModel.id).where(
                LibraryEntryModel.user_id == user_id,
                LibraryEntryModel.book_id == book_id,
            )
        ).first()
        return found is not None

    def get_entry(self, user_id: int, book_id: int) -> LibraryEntryModel | None:
        return self.db.execute(
            select(LibraryEntryModel)
            .options(joinedload(LibraryEntryModel.book))
            .where(
                LibraryEntryModel.user_id == user_id,
                LibraryEntryModel.book_id == book_id,
            )
        ).scalar_one_or_none()

    def grant(self, user_id: int, book_id: int) -> bool:
        """
        INSERT ... ON CONFLICT (user_id, book_id) DO NOTHING.
        Returns True when a new row was written.
        """
        insert = _UPSERT_DIALECTS[self.db.get_bind().dialect.name]
        stmt = (
            insert(LibraryEntryModel)
            .values(user_id=user_id, book_id=book_id, purchased_at=datetime.now(timezone.utc))
            .on_conflict_do_nothing(index_elements=["user_id", "book_id"])
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def list_entries(self, user_id: int, offset: int, limit: int) -> list[LibraryEntryModel]:
        return list(
            self.db.execute(
                select(LibraryEntryModel)
                .options(joinedload(LibraryEntryModel.book).joinedload(BookModel.category))
                .where(LibraryEntryModel.user_id == user_id)
                .order_by(LibraryEntryModel.purchased_at.desc(), LibraryEntryModel.book_id.desc())
                .offset(offset)
                .limit(limit)
            ).scalars().all()
        )

    def count_entries(self, user_id: int) -> int:
        return self.db.execute(
            select(func.count(LibraryEntryModel.id)).where(LibraryEntryModel.user_id == user_id)
        ).scalar_one()
