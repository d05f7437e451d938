"""
repositories/memory_repo.py
---------------------------
In-process stand-in for ProfileRepository with the same contract.
Enforces the unique email and never reuses ids. Used by the tests and
for running the service without a database.

Text sorting is by code point, not by database collation, so mixed-case
names can order differently than they do in PostgreSQL.
"""

import copy
from datetime import datetime, timezone
from typing import Callable, Optional

from models.storage import WRITABLE_COLUMNS, StorageRecord
from services.predicates import Predicate
from services.sorting import SortSpec
from utils.errors import DuplicateEmailError
from utils.logger import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryProfileRepository:
    """Dict-backed profile store keyed by id."""

    def __init__(self, clock: Callable[[], datetime] = _utcnow):
        self._rows: dict[int, StorageRecord] = {}
        self._next_id = 1
        self._clock = clock

    # ── READ ──────────────────────────────────────────────

    def find(self, predicate: Predicate, sort: SortSpec) -> list[StorageRecord]:
        matched = [r for r in self._rows.values() if predicate.matches(r)]
        return [copy.deepcopy(r) for r in sort.apply(matched)]

    def get_by_id(self, profile_id: int) -> Optional[StorageRecord]:
        row = self._rows.get(profile_id)
        return copy.deepcopy(row) if row else None

    def count(self) -> int:
        return len(self._rows)

    def distinct_locations(self) -> list[str]:
        return sorted({r.location for r in self._rows.values() if r.location is not None})

    def distinct_interests(self) -> list[str]:
        return sorted({
            interest
            for r in self._rows.values()
            for interest in (r.interests or [])
            if interest is not None
        })

    # ── WRITE ─────────────────────────────────────────────

    def insert(self, record: StorageRecord) -> StorageRecord:
        self._check_email(record.email, exclude_id=None)
        now = self._clock()
        row = copy.deepcopy(record)
        row.id = self._next_id
        row.created_at = now
        row.updated_at = now
        self._next_id += 1
        self._rows[row.id] = row
        logger.info(f"Added profile #{row.id} <{row.email}>")
        return copy.deepcopy(row)

    def update(self, profile_id: int, record: StorageRecord) -> Optional[StorageRecord]:
        current = self._rows.get(profile_id)
        if current is None:
            return None
        self._check_email(record.email, exclude_id=profile_id)
        for col in WRITABLE_COLUMNS:
            setattr(current, col, copy.deepcopy(getattr(record, col)))
        now = self._clock()
        current.updated_at = max(now, current.updated_at) if current.updated_at else now
        logger.info(f"Updated profile #{profile_id}")
        return copy.deepcopy(current)

    def delete(self, profile_id: int) -> bool:
        deleted = self._rows.pop(profile_id, None) is not None
        if deleted:
            logger.info(f"Deleted profile #{profile_id}")
        return deleted

    def delete_all(self) -> int:
        deleted = len(self._rows)
        self._rows.clear()
        return deleted

    def _check_email(self, email: Optional[str], exclude_id: Optional[int]) -> None:
        for row in self._rows.values():
            if row.id != exclude_id and row.email == email:
                raise DuplicateEmailError(email)
