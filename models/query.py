"""
models/query.py
---------------
Filter options accepted by the profile query, and the closed set of
sort keys and orders it understands.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class SortKey(str, Enum):
    """Fields a profile listing can be ordered by."""
    NAME = "name"
    DESCRIPTION = "description"
    CITY = "city"
    STATE = "state"
    COUNTRY = "country"
    EMAIL = "email"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ProfileFilters:
    """
    Options for a profile query. Every field is optional; an empty
    instance lists the whole directory ordered by name.

    Attributes:
        search_term: Substring to look for in name or description.
        location: Substring to look for in city, state or country.
        interests: Interests a profile must all have.
        sort_by: Requested sort key, as given by the caller.
        sort_order: 'asc' or 'desc', as given by the caller.
    """
    search_term: Optional[str] = None
    location: Optional[str] = None
    interests: list[str] = field(default_factory=list)
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ProfileFilters":
        """Build filters from a mapping with camelCase or snake_case keys."""
        if not data:
            return cls()
        interests = _get(data, "interests") or []
        if isinstance(interests, str):
            interests = [interests]
        return cls(
            search_term=_get(data, "search_term", "searchTerm"),
            location=_get(data, "location"),
            interests=list(interests),
            sort_by=_get(data, "sort_by", "sortBy"),
            sort_order=_get(data, "sort_order", "sortOrder"),
        )


def _get(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None
