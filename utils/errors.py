"""
utils/errors.py
---------------
Error taxonomy shared by the repositories and the profile service.
Storage failures are logged where they happen and re-raised as one of these.
"""

from typing import Iterable, Optional


class ProfileError(Exception):
    """Base class for every error the profile directory raises."""


class ValidationError(ProfileError):
    """Required input is missing or out of range. The caller should re-prompt."""

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Invalid or missing fields: {', '.join(self.fields)}")


class ProfileNotFoundError(ProfileError):
    """The requested profile id does not resolve to a stored record."""

    def __init__(self, profile_id):
        self.profile_id = profile_id
        super().__init__(f"Profile {profile_id!r} not found")


class DuplicateEmailError(ProfileError):
    """Another profile already uses this contact email."""

    def __init__(self, email: Optional[str]):
        self.email = email
        super().__init__(f"A profile with email {email!r} already exists")


class StorageUnavailableError(ProfileError):
    """The backing store could not be read or written."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)
