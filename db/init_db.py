"""
db/init_db.py
-------------
Creates the `profiles` table and its indexes if they do not already exist.
Run this module directly to initialize a fresh database:
    python -m db.init_db
"""

import psycopg2

from db.connection import get_connection, release_connection, rollback_connection
from utils.errors import StorageUnavailableError
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Profiles table: one row per directory entry. Everything but email is nullable.
CREATE TABLE IF NOT EXISTS profiles (
    id              SERIAL PRIMARY KEY,
    full_name       TEXT,
    photo           TEXT,
    description     TEXT,
    street          TEXT,
    city            TEXT,
    state           TEXT,
    zip_code        VARCHAR(20),
    country         TEXT,
    location        TEXT,
    latitude        NUMERIC(10,7),
    longitude       NUMERIC(10,7),
    email           TEXT UNIQUE NOT NULL,
    phone           VARCHAR(50),
    website         TEXT,
    interests       TEXT[],
    created_at      TIMESTAMPTZ DEFAULT NOW(),
    updated_at      TIMESTAMPTZ DEFAULT NOW()
);

-- Indexes for containment filters and the default ordering
CREATE INDEX IF NOT EXISTS idx_profiles_interests ON profiles USING GIN (interests);
CREATE INDEX IF NOT EXISTS idx_profiles_full_name ON profiles(full_name);
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create the profiles table.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection()
    try:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)
        conn.commit()
        logger.info("Database schema initialized successfully.")
    except psycopg2.Error as e:
        rollback_connection(conn)
        logger.error(f"Failed to initialize schema: {e}")
        raise StorageUnavailableError("Failed to initialize schema", e) from e
    finally:
        release_connection(conn)


if __name__ == "__main__":
    from db.connection import init_pool
    init_pool()
    create_tables()
    print("Database schema created successfully.")
