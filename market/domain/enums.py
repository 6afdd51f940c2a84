# market/domain/enums.py
from enum import Enum


class Role(str, Enum):
    USER = "user"
    SELLER = "seller"
    ADMIN = "admin"


class BookStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class FileType(str, Enum):
    EBOOK = "ebook"
    AUDIOBOOK = "audiobook"


class OrderStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
