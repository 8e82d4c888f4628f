# listing/pagination.py
from dataclasses import dataclass
from typing import Any, Optional

from listing.errors import ValidationError
from schemas.models import PageInfo

# Server-side ceiling, applied on every call path.
MAX_PAGE_SIZE = 10
DEFAULT_PAGE_SIZE = 10
# Largest OFFSET a 64-bit SQL backend accepts.
MAX_SKIP = 2**63 - 1


@dataclass(frozen=True)
class PaginationSpec:
    skip: Any = None
    take: Any = None


@dataclass(frozen=True)
class PageWindow:
    skip: int
    take: int


def _coerce_int(field: str, value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(field, "expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValidationError(field, f"{value!r} is not an integer") from None
    raise ValidationError(field, "expected an integer")


def clamp_window(spec: Optional[PaginationSpec] = None) -> PageWindow:
    """Clamp raw skip/take into ``0 <= skip <= MAX_SKIP`` and ``1 <= take <= MAX_PAGE_SIZE``."""
    spec = spec or PaginationSpec()
    skip = _coerce_int("skip", spec.skip)
    take = _coerce_int("take", spec.take)

    skip = min(max(skip or 0, 0), MAX_SKIP)
    if take is None:
        take = DEFAULT_PAGE_SIZE
    take = min(max(take, 1), MAX_PAGE_SIZE)
    return PageWindow(skip=skip, take=take)


def page_info(window: PageWindow, total_count: int, edge_count: int) -> PageInfo:
    return PageInfo(
        total_count=total_count,
        has_next_page=total_count > window.skip + edge_count,
        has_previous_page=window.skip > 0,
    )
