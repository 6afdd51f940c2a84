# market/domain/pagination.py
import math
from dataclasses import dataclass

from market.utils.settings import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        # limit is clamped rather than rejected
        object.__setattr__(self, "page", max(1, self.page))
        object.__setattr__(self, "limit", min(max(1, self.limit), MAX_PAGE_SIZE))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, total: int) -> dict:
        total_pages = math.ceil(total / self.limit) if total else 0
        return {
            "page": self.page,
            "limit": self.limit,
            "total": total,
            "total_pages": total_pages,
            "has_next": self.page < total_pages,
            "has_prev": self.page > 1,
        }
