"""
models/profile.py
-----------------
Domain models for directory profiles and the form input used to write them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass
class Address:
    """
    Postal address plus map coordinates.

    Attributes:
        street: Street line.
        city: City name.
        state: State, province or region.
        zip_code: Postal code.
        country: Country name.
        latitude: Degrees in [-90, 90].
        longitude: Degrees in [-180, 180].
    """
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    latitude: float = 0.0
    longitude: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Address":
        """Build an Address from form data (camelCase or snake_case keys)."""
        return cls(
            street=data.get("street") or "",
            city=data.get("city") or "",
            state=data.get("state") or "",
            zip_code=_pick(data, "zip_code", "zipCode") or "",
            country=data.get("country") or "",
            latitude=_to_float(data.get("latitude")),
            longitude=_to_float(data.get("longitude")),
        )


@dataclass
class ContactInfo:
    """Contact details. Only the email is required."""
    email: str = ""
    phone: Optional[str] = None
    website: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ContactInfo":
        return cls(
            email=data.get("email") or "",
            phone=data.get("phone"),
            website=data.get("website"),
        )


@dataclass
class Profile:
    """
    A directory entry as seen by callers.

    Every field is populated; nulls from storage have already been
    replaced with defaults by the codec.

    Attributes:
        id: Storage-assigned primary key, never reused.
        name: Full name.
        photo: Photo URL.
        description: Free-text bio.
        address: Postal address and coordinates.
        contact_info: Email (unique) plus optional phone and website.
        interests: Ordered interest tags; duplicates are kept.
        created_at: When the record was created.
        updated_at: When the record was last replaced.
    """
    id: int
    name: str
    photo: str
    description: str
    address: Address
    contact_info: ContactInfo
    interests: list[str]
    created_at: datetime
    updated_at: datetime

    def __str__(self) -> str:
        place = ", ".join(p for p in (self.address.city, self.address.country) if p)
        return f"#{self.id} {self.name} ({place or 'no location'}) <{self.contact_info.email}>"


@dataclass
class ProfileInput:
    """
    Editable profile fields as submitted by a form.

    Used for both create and update. On update every field replaces the
    stored value, so anything left as None is written as null.
    """
    name: Optional[str] = None
    description: Optional[str] = None
    photo: Optional[str] = None
    address: Optional[Address] = None
    contact_info: Optional[ContactInfo] = None
    interests: Optional[list[str]] = field(default=None)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProfileInput":
        """
        Build a ProfileInput from form data.

        Accepts ``contactInfo`` or ``contact_info`` and the nested address
        and contact objects either as mappings or as already-built models.
        """
        address = data.get("address")
        if isinstance(address, Mapping):
            address = Address.from_dict(address)

        contact = _pick(data, "contact_info", "contactInfo")
        if isinstance(contact, Mapping):
            contact = ContactInfo.from_dict(contact)

        interests = data.get("interests")
        return cls(
            name=data.get("name"),
            description=data.get("description"),
            photo=data.get("photo"),
            address=address,
            contact_info=contact,
            interests=list(interests) if interests is not None else None,
        )


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the first present value among several spellings of a key."""
    for key in keys:
        if key in data:
            return data[key]
    return None


def _to_float(value: Any) -> float:
    # Unparsable form text becomes NaN so coordinate validation rejects it.
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")
