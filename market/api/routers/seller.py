# market/api/routers/seller.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from market.api.deps import page_params, require_role
from market.data.database import get_db
from market.domain.enums import Role
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.domain.schemas import (
    BookCreatedOut,
    BookCreateIn,
    BookStatusIn,
    BookUpdateIn,
    DashboardOut,
    MessageOut,
    SellerBookListOut,
)
from market.services.seller_service import SellerService

router = APIRouter(prefix="/api/seller", tags=["seller"])

seller_only = require_role(Role.SELLER, Role.ADMIN)


def get_service(db: Session):
    return SellerService(db)


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(principal: Principal = Depends(seller_only), db: Session = Depends(get_db)):
    return get_service(db).dashboard(principal)


@router.get("/books", response_model=SellerBookListOut)
def list_books(
    page: PageRequest = Depends(page_params),
    principal: Principal = Depends(seller_only),
    db: Session = Depends(get_db),
):
    return get_service(db).list_books(principal, page)


@router.post("/books", response_model=BookCreatedOut, status_code=201)
def create_book(
    payload: BookCreateIn,
    principal: Principal = Depends(seller_only),
    db: Session = Depends(get_db),
):
    return get_service(db).create_book(principal, payload)


@router.put("/books/{book_id}", response_model=MessageOut)
def update_book(
    book_id: int,
    payload: BookUpdateIn,
    principal: Principal = Depends(seller_only),
    db: Session = Depends(get_db),
):
    return get_service(db).update_book(principal, book_id, payload)


@router.patch("/books/{book_id}/status", response_model=MessageOut)
def set_book_status(
    book_id: int,
    payload: BookStatusIn,
    principal: Principal = Depends(seller_only),
    db: Session = Depends(get_db),
):
    return get_service(db).set_status(principal, book_id, payload.status)


@router.delete("/books/{book_id}", response_model=MessageOut)
def delete_book(
    book_id: int,
    principal: Principal = Depends(seller_only),
    db: Session = Depends(get_db),
):
    return get_service(db).delete_book(principal, book_id)
