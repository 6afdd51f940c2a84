# market/domain/principal.py
from dataclasses import dataclass

from market.domain.enums import Role


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, passed explicitly into every service call."""

    user_id: int
    email: str
    role: Role

    def has_role(self, *roles: Role) -> bool:
        return self.role in roles
