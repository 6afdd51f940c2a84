#all models imported here so SQLAlchemy registers them on Base.metadata

from market.data.models.user import UserModel
from market.data.models.category import CategoryModel
from market.data.models.book import BookModel
from market.data.models.cart_item import CartItemModel
from market.data.models.library_entry import LibraryEntryModel
from market.data.models.order import OrderModel
from market.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "BookModel",
    "CartItemModel",
    "LibraryEntryModel",
    "OrderModel",
    "OrderItemModel",
]
