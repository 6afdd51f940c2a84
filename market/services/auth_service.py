# market/services/auth_service.py
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.orm import Session

from market.data.models.user import UserModel
from market.domain.enums import Role
from market.domain.errors import AuthenticationError, ConflictError, NotFoundError, ValidationError
from market.domain.principal import Principal
from market.domain.schemas import LoginIn, ProfileUpdateIn, RegisterIn
from market.repos.user_repo import UserRepo
from market.utils.security import create_access_token, hash_password, verify_password
from market.utils.logging import get_logger

logger = get_logger(__name__)


def _user_dict(user: UserModel) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "role": user.role,
        "is_verified": user.is_verified,
        "created_at": user.created_at,
    }


def _principal_for(user: UserModel) -> Principal:
    return Principal(user_id=user.id, email=user.email, role=Role(user.role))


class AuthService:
    """Credential issuance and self profile."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> Dict[str, Any]:
        if self.repo.get_by_email(payload.email):
            raise ConflictError("User already exists with this email", code="DUPLICATE_ENTRY")

        user = self.repo.create_user(
            UserModel(
                email=payload.email.lower(),
                password_hash=hash_password(payload.password),
                first_name=payload.first_name,
                last_name=payload.last_name,
                role=payload.role,
            )
        )
        logger.info(f"Registered user {user.id} with role {user.role}")

        return {
            "message": "User registered successfully",
            "token": create_access_token(_principal_for(user)),
            "user": _user_dict(user),
        }

    def login(self, payload: LoginIn) -> Dict[str, Any]:
        user = self.repo.get_by_email(payload.email)

        # same answer for unknown email and wrong password
        if not user or not verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid email or password", code="INVALID_CREDENTIALS")

        logger.info(f"User {user.id} logged in")
        return {
            "message": "Login successful",
            "token": create_access_token(_principal_for(user)),
            "user": _user_dict(user),
        }

    def get_profile(self, principal: Principal) -> Dict[str, Any]:
        user = self.repo.get_user(principal.user_id)
        if not user:
            raise NotFoundError("User not found")
        return {"user": _user_dict(user)}

    def update_profile(self, principal: Principal, payload: ProfileUpdateIn) -> Dict[str, Any]:
        changes = payload.model_dump(exclude_none=True)
        if not changes:
            raise ValidationError("No valid fields to update")

        user = self.repo.get_user(principal.user_id)
        if not user:
            raise NotFoundError("User not found")

        for field, value in changes.items():
            setattr(user, field, value)
        user.updated_at = datetime.now(timezone.utc)
        self.repo.save(user)

        logger.info(f"User {user.id} updated profile fields {sorted(changes)}")
        return {"user": _user_dict(user)}
