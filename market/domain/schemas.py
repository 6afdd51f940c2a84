# market/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from market.domain.enums import BookStatus, FileType, OrderStatus, Role

# Decimal internally, plain JSON number on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(ApiModel):
    message: str


class PaginationOut(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


# auth

class RegisterIn(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=8, description="Password must be at least 8 characters")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: Literal["user", "seller"] = "user"


class LoginIn(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdateIn(ApiModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)


class UserOut(ApiModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: Role
    is_verified: bool
    created_at: datetime | None = None


class AuthOut(ApiModel):
    message: str
    token: str
    user: UserOut


class ProfileOut(ApiModel):
    user: UserOut


# catalog

class CategoryRef(ApiModel):
    name: str | None = None
    name_en: str | None = None


class SellerRef(ApiModel):
    first_name: str | None = None
    last_name: str | None = None


class CategoryOut(ApiModel):
    id: int
    name: str
    name_en: str
    description: str | None = None
    icon: str | None = None
    gradient: str | None = None
    book_count: int = 0


class CategoryListOut(ApiModel):
    categories: List[CategoryOut]


class CategoryDetailOut(ApiModel):
    category: CategoryOut


class BookSummaryOut(ApiModel):
    id: int
    title: str
    description: str | None = None
    author: str
    price: Money
    original_price: Money | None = None
    cover_image_url: str | None = None
    file_type: FileType
    file_format: str | None = None
    duration: int | None = None
    is_featured: bool = False
    downloads_count: int = 0
    rating: float = 0.0
    reviews_count: int = 0
    created_at: datetime | None = None
    category: CategoryRef
    seller: SellerRef | None = None


class BookDetailOut(BookSummaryOut):
    file_size: int | None = None
    is_owned: bool = False


class BookListOut(ApiModel):
    books: List[BookSummaryOut]
    pagination: PaginationOut


class FeaturedBooksOut(ApiModel):
    books: List[BookSummaryOut]


class BookEnvelopeOut(ApiModel):
    book: BookDetailOut


# cart

class AddToCartIn(ApiModel):
    book_id: int = Field(..., gt=0, description="Valid book ID is required")


class CartAddOut(ApiModel):
    message: str
    cart_item_id: int


class CartBookOut(ApiModel):
    id: int
    title: str
    author: str
    price: Money
    original_price: Money | None = None
    cover_image_url: str | None = None
    file_type: FileType
    status: BookStatus
    category_name: str | None = None


class CartItemOut(ApiModel):
    cart_item_id: int
    added_at: datetime
    purchasable: bool
    book: CartBookOut


class CartOut(ApiModel):
    items: List[CartItemOut]
    total_amount: Money
    item_count: int
    checkout_ready: bool


# orders

class CheckoutIn(ApiModel):
    payment_method: str = Field(..., min_length=1, max_length=50, description="Payment method is required")


class OrderLineOut(ApiModel):
    book_id: int
    title: str
    author: str | None = None
    price: Money
    cover_image_url: str | None = None
    file_type: FileType | None = None


class OrderOut(ApiModel):
    id: int
    user_id: int
    total_amount: Money
    status: OrderStatus
    payment_method: str
    payment_id: str | None = None
    created_at: datetime
    items: List[OrderLineOut]


class CheckoutOut(ApiModel):
    message: str
    order: OrderOut


class OrderSummaryOut(ApiModel):
    id: int
    total_amount: Money
    status: OrderStatus
    payment_method: str
    item_count: int
    created_at: datetime


class OrderListOut(ApiModel):
    orders: List[OrderSummaryOut]
    pagination: PaginationOut


class OrderDetailOut(ApiModel):
    order: OrderOut


# library

class LibraryBookOut(ApiModel):
    id: int
    title: str
    description: str | None = None
    author: str
    cover_image_url: str | None = None
    file_type: FileType
    file_format: str | None = None
    file_size: int | None = None
    duration: int | None = None
    rating: float = 0.0
    reviews_count: int = 0
    category: CategoryRef


class LibraryEntryOut(ApiModel):
    purchased_at: datetime
    book: LibraryBookOut


class LibraryListOut(ApiModel):
    books: List[LibraryEntryOut]
    pagination: PaginationOut


class DownloadOut(ApiModel):
    download_url: str
    title: str
    format: str | None = None
    expires_at: datetime


class ProgressOut(ApiModel):
    book_id: int
    progress: int = 0
    last_read_at: datetime | None = None
    current_page: int = 0
    total_pages: int = 100


# seller

class BookCreateIn(ApiModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    author: str = Field(..., min_length=1, max_length=255)
    category_id: int = Field(..., gt=0, description="Valid category is required")
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Price must be positive")
    original_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    file_type: FileType
    file_format: str = Field(..., min_length=1, max_length=20)
    duration: int | None = Field(None, gt=0, description="Minutes, audiobooks only")


class BookUpdateIn(ApiModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    author: str | None = Field(None, min_length=1, max_length=255)
    category_id: int | None = Field(None, gt=0)
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    original_price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)


class BookStatusIn(ApiModel):
    status: BookStatus


class BookCreatedOut(ApiModel):
    message: str
    book_id: int


class SellerBookOut(ApiModel):
    id: int
    title: str
    author: str
    price: Money
    status: BookStatus
    is_featured: bool
    downloads_count: int
    rating: float
    reviews_count: int
    created_at: datetime
    category_name: str | None = None


class SellerBookListOut(ApiModel):
    books: List[SellerBookOut]
    pagination: PaginationOut


class DashboardStatsOut(ApiModel):
    total_books: int
    total_sales: int
    total_revenue: Money


class RecentSaleOut(ApiModel):
    order_id: int
    created_at: datetime
    price: Money
    book_title: str
    buyer_name: str


class DashboardOut(ApiModel):
    stats: DashboardStatsOut
    recent_orders: List[RecentSaleOut]
