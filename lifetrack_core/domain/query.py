# =============================================================================
# lifetrack_core/domain/query.py
# Store-independent Query (filters + ordering)
# =============================================================================
"""
A Query is evaluated by the remote store (translated to its filter API) and,
on fallback, against the local cache. Both paths must agree on matching and
ordering, so the local evaluation lives here next to the definition.

Usage:
    query = (
        Query()
        .where("userId", "u1")
        .between("date", "2024-06-01", "2024-06-07")
        .order("date")
        .order("time")
    )
"""

from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class FieldRange:
    """Inclusive range filter; either bound may be omitted."""
    field: str
    lower: Optional[Any] = None
    upper: Optional[Any] = None

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        if self.lower is not None and value < self.lower:
            return False
        if self.upper is not None and value > self.upper:
            return False
        return True


@dataclass(frozen=True)
class Ordering:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class Query:
    equals: Tuple[Tuple[str, Any], ...] = ()
    ranges: Tuple[FieldRange, ...] = ()
    order_by: Tuple[Ordering, ...] = ()
    limit: Optional[int] = None

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    def where(self, field: str, value: Any) -> Query:
        return dataclasses.replace(self, equals=self.equals + ((field, value),))

    def between(self, field: str, lower: Any = None, upper: Any = None) -> Query:
        return dataclasses.replace(self, ranges=self.ranges + (FieldRange(field, lower, upper),))

    def order(self, field: str, descending: bool = False) -> Query:
        return dataclasses.replace(self, order_by=self.order_by + (Ordering(field, descending),))

    def take(self, limit: int) -> Query:
        return dataclasses.replace(self, limit=limit)

    # -------------------------------------------------------------------------
    # Local evaluation
    # -------------------------------------------------------------------------

    def matches(self, record: Dict[str, Any]) -> bool:
        for field, value in self.equals:
            if record.get(field) != value:
                return False
        return all(r.matches(record.get(r.field)) for r in self.ranges)

    def sort(self, records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Stable multi-key sort; missing values go last."""
        result = list(records)
        # Apply keys from least to most significant
        for ordering in reversed(self.order_by):
            present = [r for r in result if r.get(ordering.field) is not None]
            missing = [r for r in result if r.get(ordering.field) is None]
            present.sort(key=lambda r: r[ordering.field], reverse=ordering.descending)
            result = present + missing
        return result

    def apply(self, records: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        result = self.sort(r for r in records if self.matches(r))
        if self.limit is not None:
            result = result[: self.limit]
        return result
