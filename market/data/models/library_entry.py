from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from market.data.database import Base


class LibraryEntryModel(Base):
    """Permanent ownership of a book. Rows are only ever inserted."""

    __tablename__ = "user_library"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False)
    purchased_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    book = relationship("BookModel")

    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_library_user_book"),)
