"""
main.py
-------
Entry point for the profile directory backend.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Seed sample profiles into an empty directory when SEED_ON_START is set.
    - Log a summary of what the directory currently holds.
"""

from config import SEED_ON_START
from db.connection import close_pool, init_pool
from db.init_db import create_tables
from db.seed import seed_profiles
from services.profile_service import ProfileService
from utils.logger import get_logger

logger = get_logger(__name__)


def log_directory_summary(service: ProfileService) -> None:
    """Log profile count and filter vocabulary sizes."""
    profiles = service.query_profiles()
    options = service.get_filter_options()
    logger.info(
        f"Directory holds {len(profiles)} profiles across "
        f"{len(options['locations'])} locations and {len(options['interests'])} interests."
    )


def main() -> None:
    """Prepare the database and report on its contents."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    try:
        create_tables()
        service = ProfileService()

        # ── 2. Optional seeding ───────────────────────────
        if SEED_ON_START and service.repo.count() == 0:
            logger.info("Directory is empty, seeding sample profiles...")
            seed_profiles(service)

        # ── 3. Summary ────────────────────────────────────
        log_directory_summary(service)
    finally:
        # ── 4. Cleanup ────────────────────────────────────
        close_pool()


if __name__ == "__main__":
    main()
