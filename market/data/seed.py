# market/data/seed.py
from decimal import Decimal

from market.data.database import SessionLocal
from market.data.models import BookModel, CategoryModel, UserModel
from market.domain.enums import BookStatus, FileType, Role
from market.utils.security import hash_password
from market.utils.settings import STORAGE_BASE_URL
from market.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = [
    ("ธุรกิจ", "business", "Business and entrepreneurship", "briefcase", "from-blue-500 to-indigo-600"),
    ("พัฒนาตนเอง", "self-help", "Personal growth", "sparkles", "from-amber-400 to-orange-500"),
    ("เทคโนโลยี", "technology", "Programming and technology", "cpu", "from-emerald-400 to-teal-600"),
    ("นิยาย", "fiction", "Novels and short stories", "book-open", "from-pink-400 to-rose-500"),
]

BOOKS = [
    ("Starting Your First Business", "Nok Siriwan", "business", "199.00", FileType.EBOOK, "pdf", True),
    ("Habits That Stick", "Arthit Kaew", "self-help", "149.00", FileType.EBOOK, "epub", True),
    ("Python for Beginners", "Ploy Chaiya", "technology", "299.00", FileType.EBOOK, "pdf", False),
    ("Night Train to Chiang Mai", "Mali Somsak", "fiction", "120.00", FileType.AUDIOBOOK, "mp3", True),
]


def seed():
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(CategoryModel).first():
            return

        categories = {}
        for name, name_en, description, icon, gradient in CATEGORIES:
            category = CategoryModel(
                name=name, name_en=name_en, description=description, icon=icon, gradient=gradient
            )
            db.add(category)
            categories[name_en] = category

        seller = UserModel(
            email="seller@example.com",
            password_hash=hash_password("seller-password"),
            first_name="Demo",
            last_name="Seller",
            role=Role.SELLER.value,
            is_verified=True,
        )
        db.add(seller)
        db.flush()

        for idx, (title, author, category, price, file_type, file_format, featured) in enumerate(BOOKS, start=1):
            db.add(
                BookModel(
                    seller_id=seller.id,
                    category_id=categories[category].id,
                    title=title,
                    author=author,
                    price=Decimal(price),
                    file_type=file_type.value,
                    file_format=file_format,
                    duration=240 if file_type == FileType.AUDIOBOOK else None,
                    file_url=f"{STORAGE_BASE_URL}/books/seed-{idx}.{file_format}",
                    cover_image_url=f"{STORAGE_BASE_URL}/covers/seed-{idx}.jpg",
                    status=BookStatus.PUBLISHED.value,
                    is_featured=featured,
                )
            )
        db.commit()
        logger.info(f"Seeded {len(CATEGORIES)} categories and {len(BOOKS)} books")
    finally:
        db.close()


if __name__ == "__main__":
    from market.data.database import init_db

    init_db()
    seed()
