"""
services/sorting.py
-------------------
Resolves a requested sort key and order into a SortSpec.

Only keys in SortKey are accepted, each mapped to exactly one column.
Anything else falls back to ordering by name.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from models.query import SortKey, SortOrder
from models.storage import StorageRecord
from utils.logger import get_logger

logger = get_logger(__name__)

SORT_COLUMNS: dict[SortKey, str] = {
    SortKey.NAME: "full_name",
    SortKey.DESCRIPTION: "description",
    SortKey.CITY: "city",
    SortKey.STATE: "state",
    SortKey.COUNTRY: "country",
    SortKey.EMAIL: "email",
    SortKey.CREATED_AT: "created_at",
    SortKey.UPDATED_AT: "updated_at",
}

# Spellings accepted besides the enum values themselves.
_KEY_ALIASES: dict[str, SortKey] = {
    "fullname": SortKey.NAME,
    "full_name": SortKey.NAME,
    "createdat": SortKey.CREATED_AT,
    "updatedat": SortKey.UPDATED_AT,
}


@dataclass(frozen=True)
class SortSpec:
    """A resolved ordering: one whitelisted column and a direction."""
    key: SortKey = SortKey.NAME
    order: SortOrder = SortOrder.ASC

    @property
    def column(self) -> str:
        return SORT_COLUMNS[self.key]

    @property
    def descending(self) -> bool:
        return self.order is SortOrder.DESC

    def to_sql(self) -> str:
        """
        Render the ORDER BY body.

        Nulls rank below every present value: first when ascending,
        last when descending.
        """
        if self.descending:
            return f"{self.column} DESC NULLS LAST"
        return f"{self.column} ASC NULLS FIRST"

    def sort_key(self, record: StorageRecord) -> tuple:
        value = getattr(record, self.column)
        if value is None:
            return (0,)
        return (1, value)

    def apply(self, records: Iterable[StorageRecord]) -> list[StorageRecord]:
        """
        Order records in process with the same null placement as to_sql.

        Text compares by code point here (so "Bob" sorts before "alice"),
        whereas PostgreSQL uses the column collation.
        """
        return sorted(records, key=self.sort_key, reverse=self.descending)


def resolve_sort(
    sort_by: Optional[Union[str, SortKey]] = None,
    sort_order: Optional[Union[str, SortOrder]] = None,
) -> SortSpec:
    """
    Map caller-supplied sort options onto a SortSpec.

    Unknown or missing keys resolve to name, unknown or missing orders
    to ascending.
    """
    return SortSpec(key=_resolve_key(sort_by), order=_resolve_order(sort_order))


def _resolve_key(raw: Any) -> SortKey:
    if isinstance(raw, SortKey):
        return raw
    if not raw:
        return SortKey.NAME
    text = str(raw).strip()
    try:
        return SortKey(text)
    except ValueError:
        pass
    alias = _KEY_ALIASES.get(text.lower())
    if alias is not None:
        return alias
    # TODO: reject unknown sort keys with ValidationError once callers stop sending them.
    logger.warning(f"Unknown sort key {raw!r}, falling back to name")
    return SortKey.NAME


def _resolve_order(raw: Any) -> SortOrder:
    if isinstance(raw, SortOrder):
        return raw
    if raw and str(raw).strip().lower() in ("desc", "descending"):
        return SortOrder.DESC
    return SortOrder.ASC
