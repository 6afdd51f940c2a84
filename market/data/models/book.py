#market/data/models/book.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from market.data.database import Base
from market.domain.enums import BookStatus


class BookModel(Base):
    """Catalog item. Books referenced by any order line are never hard-deleted."""

    __tablename__ = "books"

    id = Column(Integer, primary_key=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    author = Column(String(255), nullable=False)

    price = Column(Numeric(10, 2), nullable=False)
    original_price = Column(Numeric(10, 2), nullable=True)

    cover_image_url = Column(String(500), nullable=True)
    file_url = Column(String(500), nullable=True)
    file_type = Column(String(20), nullable=False)
    file_format = Column(String(20), nullable=False)
    file_size = Column(Integer, nullable=True)
    duration = Column(Integer, nullable=True)  # minutes, audiobooks only

    status = Column(String(20), nullable=False, default=BookStatus.DRAFT.value, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    downloads_count = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=False, default=0.0)
    reviews_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    category = relationship("CategoryModel")
    seller = relationship("UserModel")
