# market/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from market.data.models.cart_item import CartItemModel
from market.domain.enums import BookStatus
from market.domain.errors import (
    AlreadyInCartError,
    AlreadyOwnedError,
    ItemUnavailableError,
    NotFoundError,
)
from market.domain.principal import Principal
from market.repos.book_repo import BookRepo
from market.repos.cart_repo import CartRepo
from market.repos.library_repo import LibraryRepo
from market.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart ledger use cases.
    commands (add, remove, clear) modify state and commit
    query (view) is read only
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.books = BookRepo(db)
        self.library = LibraryRepo(db)

    #query
    def view_cart(self, principal: Principal) -> Dict[str, Any]:
        items = self.repo.get_cart_items(principal.user_id)

        #items unpublished since they were added stay visible but flagged
        lines = []
        for item in items:
            book = item.book
            lines.append(
                {
                    "cart_item_id": item.id,
                    "added_at": item.created_at,
                    "purchasable": book.status == BookStatus.PUBLISHED.value,
                    "book": {
                        "id": book.id,
                        "title": book.title,
                        "author": book.author,
                        "price": book.price,
                        "original_price": book.original_price,
                        "cover_image_url": book.cover_image_url,
                        "file_type": book.file_type,
                        "status": book.status,
                        "category_name": book.category.name if book.category else None,
                    },
                }
            )

        total = sum((line["book"]["price"] for line in lines), Decimal("0.00"))

        return {
            "items": lines,
            "total_amount": total,
            "item_count": len(lines),
            "checkout_ready": bool(lines) and all(line["purchasable"] for line in lines),
        }

    #commands
    def add_to_cart(self, principal: Principal, book_id: int) -> Dict[str, Any]:
        user_id = principal.user_id

        book = self.books.get_book(book_id)
        if not book or book.status != BookStatus.PUBLISHED.value:
            raise ItemUnavailableError(
                "Book not found or not available",
                status_code=404,
                details={"bookId": book_id},
            )

        if self.library.has_entry(user_id, book_id):
            raise AlreadyOwnedError("You already own this book", details={"bookId": book_id})

        if self.repo.get_cart_item(user_id, book_id):
            raise AlreadyInCartError("Book is already in your cart", details={"bookId": book_id})

        try:
            item = self.repo.add_cart_item(CartItemModel(user_id=user_id, book_id=book_id))
            self.repo.commit()
        except IntegrityError:
            # lost the race on uq_cart_user_book
            self.repo.rollback()
            raise AlreadyInCartError("Book is already in your cart", details={"bookId": book_id})

        logger.info(f"Book {book_id} added to cart of user {user_id} as item {item.id}")

        return {
            "message": "Book added to cart successfully",
            "cart_item_id": item.id,
        }

    def remove_from_cart(
        self,
        principal: Principal,
        *,
        cart_item_id: int | None = None,
        book_id: int | None = None,
    ) -> Dict[str, Any]:
        """Deletes by entry id or by book id, only within the caller's cart."""
        if cart_item_id is not None:
            removed = self.repo.delete_cart_item(principal.user_id, cart_item_id)
        elif book_id is not None:
            removed = self.repo.delete_cart_book(principal.user_id, book_id)
        else:
            raise ValueError("cart_item_id or book_id is required")

        if removed == 0:
            self.repo.rollback()
            raise NotFoundError("Cart item not found")

        self.repo.commit()
        logger.info(
            f"Removed cart entry (item={cart_item_id}, book={book_id}) for user {principal.user_id}"
        )
        return {"message": "Item removed from cart successfully"}

    def clear_cart(self, principal: Principal) -> Dict[str, Any]:
        removed = self.repo.clear_cart(principal.user_id)
        self.repo.commit()
        logger.info(f"Cleared {removed} cart entries for user {principal.user_id}")
        return {"message": "Cart cleared successfully"}
