import os

# must be set before market.* reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["ENVIRONMENT"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from market.api.deps import get_lock_service, get_payment_gateway
from market.data.database import get_db, init_db, make_engine
from market.data.models import BookModel, CartItemModel, CategoryModel, UserModel
from market.domain.enums import BookStatus, FileType, Role
from market.main import create_app
from market.services.payment_client import SimulatedPaymentGateway
from market.utils.security import hash_password
from tests.helpers import FakeLockService


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'market.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def payment_gateway():
    return SimulatedPaymentGateway(declined_methods={"declined_card"})


@pytest.fixture
def app(session_factory, lock_service, payment_gateway):
    app = create_app()

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


# data helpers

@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role: Role = Role.USER, email: str | None = None, password: str = "password123") -> UserModel:
        db.rollback()
        counter["n"] += 1
        user = UserModel(
            email=email or f"user{counter['n']}@example.com",
            password_hash=hash_password(password),
            first_name="Test",
            last_name=f"User{counter['n']}",
            role=role.value,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def category(db) -> CategoryModel:
    category = CategoryModel(name="ธุรกิจ", name_en="business", description="Business")
    db.add(category)
    db.commit()
    return category


@pytest.fixture
def seller(make_user) -> UserModel:
    return make_user(Role.SELLER, email="seller@example.com")


@pytest.fixture
def make_book(db, seller, category):
    def _make(
        price: str = "100.00",
        title: str = "A Book",
        status: BookStatus = BookStatus.PUBLISHED,
        owner: UserModel | None = None,
        **extra,
    ) -> BookModel:
        db.rollback()
        book = BookModel(
            seller_id=(owner or seller).id,
            category_id=category.id,
            title=title,
            author="Some Author",
            price=Decimal(price),
            file_type=FileType.EBOOK.value,
            file_format="pdf",
            file_url=f"https://files.test/{title}.pdf",
            status=status.value,
            **extra,
        )
        db.add(book)
        db.commit()
        return book

    return _make


@pytest.fixture
def put_in_cart(db):
    def _put(user: UserModel, book: BookModel) -> CartItemModel:
        db.rollback()
        item = CartItemModel(user_id=user.id, book_id=book.id)
        db.add(item)
        db.commit()
        return item

    return _put

