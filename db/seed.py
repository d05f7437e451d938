"""
db/seed.py
----------
Loads a small set of sample profiles into the directory.
Run this module directly against a configured database:
    python -m db.seed            # add samples, skip emails already present
    python -m db.seed --clear    # wipe the table first
"""

import sys

from utils.errors import DuplicateEmailError
from utils.logger import get_logger

logger = get_logger(__name__)

SAMPLE_PROFILES: list[dict] = [
    {
        "name": "Priya Raman",
        "photo": "https://images.example.com/people/priya.jpg",
        "description": "Data engineer building streaming pipelines with Kafka and Spark.",
        "address": {
            "street": "12 Congress Ave", "city": "Austin", "state": "TX",
            "zipCode": "78701", "country": "USA",
            "latitude": 30.2672, "longitude": -97.7431,
        },
        "contactInfo": {"email": "priya.raman@example.com", "phone": "512-555-0142"},
        "interests": ["Kafka", "Spark", "Climbing"],
    },
    {
        "name": "Tomás Ferreira",
        "photo": "https://images.example.com/people/tomas.jpg",
        "description": "Mobile developer shipping Kotlin and Swift apps for logistics companies.",
        "address": {
            "street": "Rua Augusta 210", "city": "Lisbon", "state": "Lisboa",
            "zipCode": "1100-053", "country": "Portugal",
            "latitude": 38.7223, "longitude": -9.1393,
        },
        "contactInfo": {"email": "tomas.ferreira@example.com", "website": "https://tomasf.dev"},
        "interests": ["Kotlin", "Swift", "Surfing"],
    },
    {
        "name": "Hana Kobayashi",
        "photo": "https://images.example.com/people/hana.jpg",
        "description": "Product designer focused on accessibility and design systems.",
        "address": {
            "street": "3-1 Marunouchi", "city": "Tokyo", "state": "Tokyo",
            "zipCode": "100-0005", "country": "Japan",
            "latitude": 35.6812, "longitude": 139.7671,
        },
        "contactInfo": {"email": "hana.k@example.com"},
        "interests": ["Accessibility", "Design Systems", "Photography"],
    },
    {
        "name": "Kwame Mensah",
        "photo": "https://images.example.com/people/kwame.jpg",
        "description": "Site reliability engineer running Kubernetes clusters at scale.",
        "address": {
            "street": "45 Independence Ave", "city": "Accra", "state": "Greater Accra",
            "zipCode": "GA-100", "country": "Ghana",
            "latitude": 5.6037, "longitude": -0.1870,
        },
        "contactInfo": {"email": "kwame.mensah@example.com", "phone": "+233-30-555-0199"},
        "interests": ["Kubernetes", "Observability", "Football"],
    },
    {
        "name": "Elise Novak",
        "photo": "https://images.example.com/people/elise.jpg",
        "description": "Machine learning researcher working on recommender systems.",
        "address": {
            "street": "Wenceslas Square 1", "city": "Prague", "state": "Prague",
            "zipCode": "110 00", "country": "Czech Republic",
            "latitude": 50.0755, "longitude": 14.4378,
        },
        "contactInfo": {"email": "elise.novak@example.com", "website": "https://novak.ai"},
        "interests": ["Machine Learning", "Spark", "Photography"],
    },
]


def seed_profiles(service, clear: bool = False) -> int:
    """
    Insert the sample profiles through the profile service.

    Args:
        service: A ProfileService.
        clear: Delete every existing profile first.

    Returns:
        Number of profiles inserted. Emails that already exist are skipped.
    """
    if clear:
        service.repo.delete_all()

    inserted = 0
    for sample in SAMPLE_PROFILES:
        try:
            profile = service.create_profile(sample)
        except DuplicateEmailError as e:
            logger.warning(f"Skipping sample profile: {e}")
            continue
        inserted += 1
        logger.info(f"Seeded {profile}")
    logger.info(f"Seeded {inserted} of {len(SAMPLE_PROFILES)} sample profiles.")
    return inserted


if __name__ == "__main__":
    from db.connection import close_pool, init_pool
    from db.init_db import create_tables
    from services.profile_service import ProfileService

    init_pool()
    create_tables()
    count = seed_profiles(ProfileService(), clear="--clear" in sys.argv[1:])
    close_pool()
    print(f"Seeded {count} profiles.")
