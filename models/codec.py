"""
models/codec.py
---------------
Two-way mapping between StorageRecord (nullable, coordinates as text)
and the domain models (defaulted, coordinates as float).
All null handling for profiles lives here.
"""

import math
from datetime import datetime, timezone
from typing import Optional

from models.profile import Address, ContactInfo, Profile, ProfileInput
from models.storage import StorageRecord


def to_domain(record: StorageRecord) -> Profile:
    """
    Convert a stored row into a Profile. Never raises.

    Null text becomes "", null phone/website stay None, null or
    unparsable coordinates become 0, null interests become [].
    """
    now = datetime.now(timezone.utc)
    created_at = record.created_at or now
    return Profile(
        id=record.id,
        name=record.full_name or "",
        photo=record.photo or "",
        description=record.description or "",
        address=Address(
            street=record.street or "",
            city=record.city or "",
            state=record.state or "",
            zip_code=record.zip_code or "",
            country=record.country or "",
            latitude=parse_coordinate(record.latitude),
            longitude=parse_coordinate(record.longitude),
        ),
        contact_info=ContactInfo(
            email=record.email or "",
            phone=record.phone,
            website=record.website,
        ),
        interests=list(record.interests) if record.interests else [],
        created_at=created_at,
        updated_at=record.updated_at or created_at,
    )


def to_storage(data: ProfileInput) -> StorageRecord:
    """
    Convert validated form input into a row ready to be written.

    Coordinates are stringified without rounding. Optional contact fields
    pass through unchanged, empty strings included.
    """
    address = data.address or Address()
    contact = data.contact_info or ContactInfo()
    return StorageRecord(
        full_name=data.name,
        photo=data.photo,
        description=data.description,
        street=address.street,
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
        country=address.country,
        location=location_summary(address.city, address.state, address.country),
        latitude=format_coordinate(address.latitude),
        longitude=format_coordinate(address.longitude),
        email=contact.email,
        phone=contact.phone,
        website=contact.website,
        interests=list(data.interests) if data.interests is not None else [],
    )


def parse_coordinate(text: Optional[str]) -> float:
    """Parse decimal text into a float, falling back to 0 for null or junk."""
    if text is None:
        return 0.0
    try:
        value = float(text)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def format_coordinate(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    return repr(float(value))


def location_summary(*parts: Optional[str]) -> Optional[str]:
    """Join the non-blank parts with ", ", e.g. "Austin, TX, USA"."""
    cleaned = [p.strip() for p in parts if p and p.strip()]
    return ", ".join(cleaned) if cleaned else None
