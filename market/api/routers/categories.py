from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from market.data.database import get_db
from market.domain.schemas import CategoryDetailOut, CategoryListOut
from market.services.catalog_service import CatalogService

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=CategoryListOut)
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()


@router.get("/{category_id}", response_model=CategoryDetailOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).get_category(category_id)
