"""
models/storage.py
-----------------
Row-level model of the `profiles` table. Mirrors the columns one to one,
so every field is nullable except the unique email.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass
class StorageRecord:
    """
    A persisted profile row.

    Coordinates are kept as decimal text, the way NUMERIC columns are
    read back from PostgreSQL. `location` is a denormalised summary of
    city, state and country written alongside the address.
    """
    email: str
    id: Optional[int] = None
    full_name: Optional[str] = None
    photo: Optional[str] = None
    description: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    location: Optional[str] = None
    latitude: Optional[str] = None
    longitude: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    interests: Optional[list[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "StorageRecord":
        """Build a record from a dict-like database row, ignoring unknown columns."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in row.items() if k in known}
        for coord in ("latitude", "longitude"):
            if values.get(coord) is not None:
                values[coord] = str(values[coord])
        return cls(**values)


# Columns written on insert/update, in a fixed order.
WRITABLE_COLUMNS: tuple[str, ...] = (
    "full_name", "photo", "description",
    "street", "city", "state", "zip_code", "country", "location",
    "latitude", "longitude",
    "email", "phone", "website", "interests",
)
