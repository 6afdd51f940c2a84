from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from market.api.deps import get_current_principal, page_params
from market.data.database import get_db
from market.domain.pagination import PageRequest
from market.domain.principal import Principal
from market.domain.schemas import DownloadOut, LibraryListOut, ProgressOut
from market.services.library_service import LibraryService

router = APIRouter(prefix="/api/library", tags=["library"])


@router.get("", response_model=LibraryListOut)
def list_library(
    page: PageRequest = Depends(page_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return LibraryService(db).list_entitlements(principal, page)


@router.get("/download/{book_id}", response_model=DownloadOut)
def download(
    book_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return LibraryService(db).download_link(principal, book_id)


@router.get("/progress/{book_id}", response_model=ProgressOut)
def reading_progress(
    book_id: int,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return LibraryService(db).reading_progress(principal, book_id)
