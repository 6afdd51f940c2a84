#market/api/routers/cart.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from market.api.deps import get_current_principal
from market.data.database import get_db
from market.domain.principal import Principal
from market.domain.schemas import AddToCartIn, CartAddOut, CartOut, MessageOut
from market.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def view_cart(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return get_service(db).view_cart(principal)


@router.post("", response_model=CartAddOut, status_code=201)
@router.post("/add", response_model=CartAddOut, status_code=201)
def add_to_cart(
    payload: AddToCartIn,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return get_service(db).add_to_cart(principal, payload.book_id)


@router.delete("", response_model=MessageOut)
def clear_cart(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return get_service(db).clear_cart(principal)


@router.delete("/books/{book_id}", response_model=MessageOut)
def remove_book_from_cart(
    book_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_from_cart(principal, book_id=book_id)


@router.delete("/{cart_item_id}", response_model=MessageOut)
def remove_from_cart(
    cart_item_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_from_cart(principal, cart_item_id=cart_item_id)
