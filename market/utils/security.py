# market/utils/security.py
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.hash import pbkdf2_sha256

from market.domain.enums import Role
from market.domain.principal import Principal
from market.utils.settings import JWT_ALGORITHM, JWT_EXPIRES_DAYS, JWT_ISSUER, JWT_SECRET


def hash_password(password: str) -> str:
    return pbkdf2_sha256.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pbkdf2_sha256.verify(password, password_hash)
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(principal: Principal, expires_delta: timedelta | None = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(days=JWT_EXPIRES_DAYS)
    payload = {
        "sub": str(principal.user_id),
        "email": principal.email,
        "role": principal.role.value,
        "iss": JWT_ISSUER,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Principal | None:
    """Returns None for any invalid, expired or foreign token."""
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM], issuer=JWT_ISSUER)
        return Principal(
            user_id=int(payload["sub"]),
            email=payload["email"],
            role=Role(payload["role"]),
        )
    except (JWTError, KeyError, ValueError):
        return None


def extract_bearer_token(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None
