"""
services/predicates.py
----------------------
Turns ProfileFilters into a conjunction of optional clauses.

Each clause renders a parametrised SQL fragment for the PostgreSQL
repository and can also test a StorageRecord directly, with the same
semantics (a NULL column never matches).
"""

from typing import Iterable, Optional, Sequence

from models.query import ProfileFilters
from models.storage import StorageRecord

# Column groups searched by the text clauses. Never built from caller input.
SEARCH_COLUMNS: tuple[str, ...] = ("full_name", "description")
LOCATION_COLUMNS: tuple[str, ...] = ("city", "state", "country")


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term is matched literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class Clause:
    """A single filter condition."""

    def to_sql(self) -> tuple[str, list]:
        raise NotImplementedError

    def matches(self, record: StorageRecord) -> bool:
        raise NotImplementedError


class SubstringClause(Clause):
    """Case-insensitive substring match on any of several text columns."""

    def __init__(self, term: str, columns: Sequence[str]):
        self.term = term
        self.columns = tuple(columns)

    def to_sql(self) -> tuple[str, list]:
        pattern = f"%{escape_like(self.term)}%"
        parts = [f"{col} ILIKE %s ESCAPE '\\'" for col in self.columns]
        return "(" + " OR ".join(parts) + ")", [pattern] * len(self.columns)

    def matches(self, record: StorageRecord) -> bool:
        needle = self.term.lower()
        for col in self.columns:
            value = getattr(record, col)
            if value is not None and needle in value.lower():
                return True
        return False

    def __repr__(self) -> str:
        return f"SubstringClause({self.term!r}, {self.columns})"


class ContainsAllClause(Clause):
    """The list column must contain every one of the given values."""

    def __init__(self, column: str, values: Iterable[str]):
        self.column = column
        self.values = list(values)

    def to_sql(self) -> tuple[str, list]:
        return f"{self.column} @> %s::text[]", [self.values]

    def matches(self, record: StorageRecord) -> bool:
        present = getattr(record, self.column)
        if present is None:
            return False
        return all(value in present for value in self.values)

    def __repr__(self) -> str:
        return f"ContainsAllClause({self.column!r}, {self.values})"


class Predicate:
    """Conjunction of clauses. With no clauses it matches every record."""

    def __init__(self, clauses: Optional[Sequence[Clause]] = None):
        self.clauses = list(clauses or [])

    def to_sql(self) -> tuple[str, list]:
        """
        Render as a WHERE body.

        Returns:
            ("", []) when there are no clauses, so the caller can omit WHERE.
        """
        if not self.clauses:
            return "", []
        fragments, params = [], []
        for clause in self.clauses:
            sql, clause_params = clause.to_sql()
            fragments.append(sql)
            params.extend(clause_params)
        return " AND ".join(fragments), params

    def matches(self, record: StorageRecord) -> bool:
        return all(clause.matches(record) for clause in self.clauses)

    def __bool__(self) -> bool:
        return bool(self.clauses)

    def __repr__(self) -> str:
        return f"Predicate({self.clauses})"


def build_predicate(filters: ProfileFilters) -> Predicate:
    """
    Build the predicate for a set of filter options.

    A blank search term or location, or an empty interest list, adds no
    clause at all. Blank strings inside the interest list are kept and
    must be present like any other value.
    """
    clauses: list[Clause] = []

    if filters.search_term and filters.search_term.strip():
        clauses.append(SubstringClause(filters.search_term, SEARCH_COLUMNS))

    if filters.location and filters.location.strip():
        clauses.append(SubstringClause(filters.location, LOCATION_COLUMNS))

    wanted = [i for i in (filters.interests or []) if i is not None]
    if wanted:
        clauses.append(ContainsAllClause("interests", wanted))

    return Predicate(clauses)
