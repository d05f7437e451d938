"""
services/profile_service.py
---------------------------
Business logic for the profile directory.
Orchestrates predicate building, sort resolution, the repository and the
codec, and announces changed views after every successful mutation.
"""

import math
import re
from typing import Any, Mapping, Optional, Union

from models.codec import to_domain, to_storage
from models.profile import Profile, ProfileInput
from models.query import ProfileFilters
from repositories.profile_repo import ProfileRepository
from services.invalidation import LISTING_KEY, InvalidationBus, InvalidationEvent, detail_key
from services.predicates import build_predicate
from services.sorting import resolve_sort
from utils.errors import ProfileNotFoundError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)

# Upper bound of a PostgreSQL SERIAL column.
MAX_PROFILE_ID = 2_147_483_647

_ID_PATTERN = re.compile(r"[0-9]+")


def parse_profile_id(raw: Any) -> Optional[int]:
    """
    Parse a caller-supplied id.

    Returns:
        The id as an int, or None unless it is a positive integer in range.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _ID_PATTERN.fullmatch(raw.strip()):
        value = int(raw.strip())
    else:
        return None
    return value if 0 < value <= MAX_PROFILE_ID else None


class ProfileService:
    """
    Query and mutation entry points for the presentation layer.

    Workflow for writes:
        1. Coerce form input into a ProfileInput.
        2. Validate required fields and coordinate ranges.
        3. Encode for storage and persist via the repository.
        4. Publish the stale view keys.
        5. Return the stored profile as a domain object.
    """

    def __init__(self, repo=None, bus: Optional[InvalidationBus] = None):
        self.repo = repo if repo is not None else ProfileRepository()
        self.bus = bus if bus is not None else InvalidationBus()

    # ── QUERIES ───────────────────────────────────────────

    def query_profiles(
        self, filters: Union[ProfileFilters, Mapping[str, Any], None] = None
    ) -> list[Profile]:
        """
        List every profile matching the filters, in the requested order.

        Args:
            filters: ProfileFilters, a mapping of filter options, or None for all.

        Returns:
            The full ordered result set.

        Raises:
            StorageUnavailableError: If the profiles cannot be read.
        """
        if not isinstance(filters, ProfileFilters):
            filters = ProfileFilters.from_dict(filters)
        predicate = build_predicate(filters)
        sort = resolve_sort(filters.sort_by, filters.sort_order)
        records = self.repo.find(predicate, sort)
        logger.info(f"Found {len(records)} profiles for {predicate!r} ordered by {sort.to_sql()}")
        return [to_domain(r) for r in records]

    def get_profile_by_id(self, profile_id: Any) -> Optional[Profile]:
        """Fetch one profile. Returns None for malformed or unknown ids."""
        pid = parse_profile_id(profile_id)
        if pid is None:
            logger.info(f"Ignoring malformed profile id {profile_id!r}")
            return None
        record = self.repo.get_by_id(pid)
        if record is None:
            logger.info(f"Profile #{pid} not found")
            return None
        return to_domain(record)

    def get_filter_options(self) -> dict[str, list[str]]:
        """
        Distinct values to offer as filter choices.

        Returns:
            {'locations': [...], 'interests': [...]}, both sorted ascending.
        """
        locations = self.repo.distinct_locations()
        interests = self.repo.distinct_interests()
        logger.info(f"Filter options: {len(locations)} locations, {len(interests)} interests")
        return {"locations": locations, "interests": interests}

    # ── MUTATIONS ─────────────────────────────────────────

    def create_profile(self, form: Union[ProfileInput, Mapping[str, Any]]) -> Profile:
        """
        Validate and store a new profile.

        Raises:
            ValidationError: Required fields missing or coordinates out of range.
            DuplicateEmailError: Another profile already has this email.
            StorageUnavailableError: The insert could not be performed.
        """
        data = self._validated(form)
        saved = self.repo.insert(to_storage(data))
        self.bus.publish(InvalidationEvent((LISTING_KEY, detail_key(saved.id)), "create"))
        return to_domain(saved)

    def update_profile(self, profile_id: Any, form: Union[ProfileInput, Mapping[str, Any]]) -> Profile:
        """
        Replace an existing profile with the submitted fields.

        Fields missing from the form are cleared, not kept.

        Raises:
            ValidationError: Required fields missing or coordinates out of range.
            ProfileNotFoundError: No profile has this id.
            DuplicateEmailError: Another profile already has this email.
            StorageUnavailableError: The update could not be performed.
        """
        data = self._validated(form)
        pid = parse_profile_id(profile_id)
        if pid is None:
            raise ProfileNotFoundError(profile_id)
        saved = self.repo.update(pid, to_storage(data))
        if saved is None:
            logger.warning(f"Update of missing profile #{pid}")
            raise ProfileNotFoundError(pid)
        self.bus.publish(InvalidationEvent((LISTING_KEY, detail_key(pid)), "update"))
        return to_domain(saved)

    def delete_profile(self, profile_id: Any) -> dict[str, bool]:
        """
        Delete a profile.

        Returns:
            {'success': False} when the id is malformed or unknown,
            {'success': True} otherwise. Storage failures still raise.
        """
        pid = parse_profile_id(profile_id)
        if pid is None or not self.repo.delete(pid):
            logger.warning(f"Profile {profile_id!r} not found for deletion")
            return {"success": False}
        self.bus.publish(InvalidationEvent((LISTING_KEY, detail_key(pid)), "delete"))
        return {"success": True}

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _validated(form: Union[ProfileInput, Mapping[str, Any]]) -> ProfileInput:
        """Coerce form input and check it, raising ValidationError on problems."""
        if isinstance(form, Mapping):
            form = ProfileInput.from_dict(form)
        elif not isinstance(form, ProfileInput):
            raise ValidationError(["input"])

        problems = [
            name for name, value in (("name", form.name), ("description", form.description))
            if not value or not value.strip()
        ]
        if form.address is None:
            problems.append("address")
        else:
            lat, lng = form.address.latitude, form.address.longitude
            if lat is None or not math.isfinite(lat) or not -90 <= lat <= 90:
                problems.append("address.latitude")
            if lng is None or not math.isfinite(lng) or not -180 <= lng <= 180:
                problems.append("address.longitude")
        email = form.contact_info.email if form.contact_info else None
        if not email or not email.strip():
            problems.append("contact_info.email")

        if problems:
            logger.info(f"Rejected profile input, problems with: {problems}")
            raise ValidationError(problems)
        return form
