"""
repositories/profile_repo.py
----------------------------
Data access layer for directory profiles.
All SQL queries related to the `profiles` table live here.
"""

from typing import Optional

import psycopg2
from psycopg2 import errors, extras

from db.connection import get_connection, release_connection, rollback_connection
from models.storage import WRITABLE_COLUMNS, StorageRecord
from services.predicates import Predicate
from services.sorting import SortSpec
from utils.errors import DuplicateEmailError, StorageUnavailableError
from utils.logger import get_logger

logger = get_logger(__name__)


class ProfileRepository:
    """Repository for CRUD and lookup queries on the profiles table."""

    # ── READ ──────────────────────────────────────────────

    def find(self, predicate: Predicate, sort: SortSpec) -> list[StorageRecord]:
        """
        Fetch every profile matching a predicate, in the requested order.

        Args:
            predicate: Filter clauses; an empty predicate selects all rows.
            sort: Resolved ordering.

        Returns:
            The complete list of matching records.
        """
        where, params = predicate.to_sql()
        sql = "SELECT * FROM profiles"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {sort.to_sql()};"
        rows = self._fetch_all(sql, params, "query profiles")
        return [StorageRecord.from_row(r) for r in rows]

    def get_by_id(self, profile_id: int) -> Optional[StorageRecord]:
        """
        Fetch a single profile by primary key.

        Returns:
            A StorageRecord or None if not found.
        """
        rows = self._fetch_all(
            "SELECT * FROM profiles WHERE id = %s;", (profile_id,), f"fetch profile #{profile_id}"
        )
        return StorageRecord.from_row(rows[0]) if rows else None

    def count(self) -> int:
        """Number of stored profiles."""
        rows = self._fetch_all("SELECT COUNT(*) AS total FROM profiles;", (), "count profiles")
        return int(rows[0]["total"])

    def distinct_locations(self) -> list[str]:
        """Distinct non-null location summaries, ascending."""
        sql = """
            SELECT DISTINCT location FROM profiles
            WHERE location IS NOT NULL
            ORDER BY location;
        """
        return [r["location"] for r in self._fetch_all(sql, (), "list locations")]

    def distinct_interests(self) -> list[str]:
        """Distinct non-null interests across all profiles (unnested), ascending."""
        sql = """
            SELECT DISTINCT interest
            FROM profiles, unnest(interests) AS interest
            WHERE interest IS NOT NULL
            ORDER BY interest;
        """
        return [r["interest"] for r in self._fetch_all(sql, (), "list interests")]

    # ── CREATE ────────────────────────────────────────────

    def insert(self, record: StorageRecord) -> StorageRecord:
        """
        Insert a new profile row.

        id, created_at and updated_at come from column defaults.

        Returns:
            The stored row as read back from the database.

        Raises:
            DuplicateEmailError: If the email is already taken.
        """
        columns = ", ".join(WRITABLE_COLUMNS)
        placeholders = ", ".join(["%s"] * len(WRITABLE_COLUMNS))
        sql = f"INSERT INTO profiles ({columns}) VALUES ({placeholders}) RETURNING *;"
        row = self._write_one(sql, self._values(record), record.email, "add profile")
        saved = StorageRecord.from_row(row)
        logger.info(f"Added profile #{saved.id} <{saved.email}>")
        return saved

    # ── UPDATE ────────────────────────────────────────────

    def update(self, profile_id: int, record: StorageRecord) -> Optional[StorageRecord]:
        """
        Replace every writable column of an existing profile.

        updated_at is set to NOW(), but never moved backwards.

        Returns:
            The updated row, or None if no profile has this id.
        """
        assignments = ", ".join(f"{col} = %s" for col in WRITABLE_COLUMNS)
        sql = f"""
            UPDATE profiles
            SET {assignments}, updated_at = GREATEST(NOW(), updated_at)
            WHERE id = %s
            RETURNING *;
        """
        params = self._values(record) + [profile_id]
        row = self._write_one(sql, params, record.email, f"update profile #{profile_id}")
        if row is None:
            return None
        logger.info(f"Updated profile #{profile_id}")
        return StorageRecord.from_row(row)

    # ── DELETE ────────────────────────────────────────────

    def delete(self, profile_id: int) -> bool:
        """
        Delete a profile by ID.

        Returns:
            True if a row was deleted, False otherwise.
        """
        sql = "DELETE FROM profiles WHERE id = %s RETURNING id;"
        row = self._write_one(sql, (profile_id,), None, f"delete profile #{profile_id}")
        if row is not None:
            logger.info(f"Deleted profile #{profile_id}")
        return row is not None

    def delete_all(self) -> int:
        """Remove every profile. Used by the seeding script only."""
        conn = get_connection()
        try:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM profiles;")
                deleted = cur.rowcount
            conn.commit()
            logger.warning(f"Cleared {deleted} profiles")
            return deleted
        except psycopg2.Error as e:
            rollback_connection(conn)
            logger.error(f"Failed to clear profiles: {e}")
            raise StorageUnavailableError("Failed to clear profiles", e) from e
        finally:
            release_connection(conn)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _values(record: StorageRecord) -> list:
        return [getattr(record, col) for col in WRITABLE_COLUMNS]

    @staticmethod
    def _fetch_all(sql: str, params, action: str) -> list[dict]:
        """Run a read query and return all rows as dicts."""
        conn = get_connection()
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                return cur.fetchall()
        except psycopg2.Error as e:
            rollback_connection(conn)
            logger.error(f"Failed to {action}: {e}")
            raise StorageUnavailableError(f"Failed to {action}", e) from e
        finally:
            release_connection(conn)

    @staticmethod
    def _write_one(sql: str, params, email: Optional[str], action: str) -> Optional[dict]:
        """Run a single-row write with RETURNING, commit, and return the row (or None)."""
        conn = get_connection()
        try:
            with conn.cursor(cursor_factory=extras.RealDictCursor) as cur:
                cur.execute(sql, params)
                row = cur.fetchone()
            conn.commit()
            return row
        except errors.UniqueViolation as e:
            rollback_connection(conn)
            logger.warning(f"Failed to {action}: email {email!r} already in use")
            raise DuplicateEmailError(email) from e
        except psycopg2.Error as e:
            rollback_connection(conn)
            logger.error(f"Failed to {action}: {e}")
            raise StorageUnavailableError(f"Failed to {action}", e) from e
        finally:
            release_connection(conn)
