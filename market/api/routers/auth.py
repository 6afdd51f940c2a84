# market/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from market.api.deps import get_current_principal
from market.data.database import get_db
from market.domain.principal import Principal
from market.domain.schemas import AuthOut, LoginIn, ProfileOut, ProfileUpdateIn, RegisterIn
from market.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_service(db: Session):
    return AuthService(db)


@router.post("/register", response_model=AuthOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    return get_service(db).register(payload)


@router.post("/login", response_model=AuthOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return get_service(db).login(payload)


@router.get("/me", response_model=ProfileOut)
@router.get("/profile", response_model=ProfileOut)
def get_profile(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return get_service(db).get_profile(principal)


@router.put("/profile", response_model=ProfileOut)
def update_profile(
    payload: ProfileUpdateIn,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return get_service(db).update_profile(principal, payload)
