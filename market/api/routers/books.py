# market/api/routers/books.py
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from market.api.deps import get_optional_principal, page_params
from market.data.database import get_db
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.domain.schemas import BookEnvelopeOut, BookListOut, FeaturedBooksOut
from market.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/books", tags=["books"])


@router.get("", response_model=BookListOut)
def list_books(
    page: PageRequest = Depends(page_params),
    q: str | None = Query(None, max_length=200),
    category: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    sort_by: Literal["title", "price", "rating", "created_at"] = Query("created_at", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_books(
        page,
        q=q,
        category=category,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        sort_order=sort_order,
    )


# declared before /{book_id} so "featured" is not parsed as an id
@router.get("/featured", response_model=FeaturedBooksOut)
def featured_books(db: Session = Depends(get_db)):
    return CatalogService(db).featured_books()


@router.get("/{book_id}", response_model=BookEnvelopeOut)
def get_book(
    book_id: int,
    principal: Principal | None = Depends(get_optional_principal),
    db: Session = Depends(get_db),
):
    return CatalogService(db).get_book(book_id, principal)
