"""
Query filters for transaction records.

A filter is an immutable value built from request parameters by the
pure functions at the bottom of this module; the record store compiles
it to SQL.  Keeping the month policy here (required for the monthly
aggregations, optional for the list endpoint) means it can be tested
without a database.

Month predicates come in three kinds:

``any``
    no month restriction.
``equals``
    compare the stored ``sale_month`` column.
``pattern``
    substring match of ``-MM-`` against the serialized sale date.  An
    empty month produces the token ``--``, which matches no ISO date.
"""

import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import EMPTY_MONTH_LITERAL
from .errors import ValidationError


MONTH_ANY = "any"
MONTH_EQUALS = "equals"
MONTH_PATTERN = "pattern"

# Columns the search text is matched against.  ``price`` is compared as
# its text rendering, so ``"49"`` matches ``149.0`` and ``549.5``.
SEARCH_FIELDS: Tuple[str, ...] = ("title", "description", "price")

_MONTH_RE = re.compile(r"^\d{2}$")

# Largest value SQLite accepts for LIMIT and OFFSET.
SQLITE_MAX_INTEGER = 2**63 - 1


@dataclass(frozen=True)
class MonthPredicate:
    kind: str = MONTH_ANY
    month: Optional[int] = None
    token: str = ""

    @classmethod
    def any(cls) -> "MonthPredicate":
        return cls(kind=MONTH_ANY)

    @classmethod
    def equals(cls, month: int) -> "MonthPredicate":
        return cls(kind=MONTH_EQUALS, month=month)

    @classmethod
    def pattern(cls, month: str) -> "MonthPredicate":
        return cls(kind=MONTH_PATTERN, token=f"-{month}-")


@dataclass(frozen=True)
class SearchPredicate:
    """Case-insensitive substring match, OR-ed over ``fields``."""

    text: str = ""
    fields: Tuple[str, ...] = SEARCH_FIELDS

    @property
    def is_empty(self) -> bool:
        return self.text == ""


@dataclass(frozen=True)
class TransactionFilter:
    """Month predicate AND search predicate AND optional sold flag."""

    month: MonthPredicate = MonthPredicate()
    search: SearchPredicate = SearchPredicate()
    sold: Optional[bool] = None

    def with_sold(self, sold: bool) -> "TransactionFilter":
        return replace(self, sold=sold)


@dataclass(frozen=True)
class PriceRange:
    """One histogram bucket.

    A price belongs to the bucket when ``above < price <= up_to``.  A
    ``None`` lower bound means "from zero inclusive" and a ``None`` upper
    bound means unbounded.
    """

    label: str
    above: Optional[float]
    up_to: Optional[float]

    def contains(self, price: float) -> bool:
        if price < 0:
            return False
        if self.above is not None and price <= self.above:
            return False
        if self.up_to is not None and price > self.up_to:
            return False
        return True


PRICE_RANGES: Tuple[PriceRange, ...] = (
    PriceRange("0-100", None, 100),
    *(PriceRange(f"{low + 1}-{low + 100}", low, low + 100) for low in range(100, 900, 100)),
    PriceRange("901-above", 900, None),
)


def price_bucket(price: float) -> Optional[str]:
    """Return the label of the bucket ``price`` falls into (None if negative)."""
    for price_range in PRICE_RANGES:
        if price_range.contains(price):
            return price_range.label
    return None


@dataclass(frozen=True)
class Page:
    page: int
    per_page: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page


def parse_month(value: str) -> int:
    """Validate a two-digit month string (``"01"`` to ``"12"``)."""
    value = value.strip()
    if not _MONTH_RE.match(value) or not 1 <= int(value) <= 12:
        raise ValidationError(f"Month must be a two-digit value between 01 and 12, got {value!r}")
    return int(value)


def require_month(value: Optional[str]) -> MonthPredicate:
    """Month predicate for endpoints where the month is mandatory."""
    if value is None or not value.strip():
        raise ValidationError("Month parameter is required")
    return MonthPredicate.equals(parse_month(value))


def optional_month(value: Optional[str], empty_mode: str) -> MonthPredicate:
    """Month predicate for the list endpoint.

    A present month is validated and compared structurally.  An absent
    or empty month means no restriction, unless ``empty_mode`` is
    ``literal``, in which case the serialized date must contain ``--``.
    """
    if value is None or not value.strip():
        if empty_mode == EMPTY_MONTH_LITERAL:
            return MonthPredicate.pattern("")
        return MonthPredicate.any()
    return MonthPredicate.equals(parse_month(value))


def build_month_filter(month: Optional[str]) -> TransactionFilter:
    return TransactionFilter(month=require_month(month))


def build_list_filter(search: Optional[str], month: Optional[str], empty_mode: str) -> TransactionFilter:
    return TransactionFilter(
        month=optional_month(month, empty_mode),
        search=SearchPredicate(text=search or ""),
    )


def clamp_page(page: Optional[int], per_page: Optional[int], default_per_page: int, max_per_page: int) -> Page:
    """Turn raw pagination parameters into a valid ``Page``.

    ``page`` below 1 becomes 1; a missing or non-positive ``per_page``
    becomes ``default_per_page``; anything above ``max_per_page`` is
    capped.  ``page`` is capped so that the row offset still fits in a
    SQLite integer; such pages are simply empty.
    """
    page = page if page is not None and page >= 1 else 1
    if per_page is None or per_page <= 0:
        per_page = default_per_page
    per_page = min(per_page, max_per_page)
    return Page(page=min(page, SQLITE_MAX_INTEGER // per_page), per_page=per_page)
