"""Unit tests for ProfileService against the in-process repository."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from models.profile import Address, ContactInfo, ProfileInput
from models.query import ProfileFilters
from repositories.memory_repo import InMemoryProfileRepository
from services.invalidation import InvalidationEvent
from services.profile_service import ProfileService, parse_profile_id
from utils.errors import (
    DuplicateEmailError,
    ProfileNotFoundError,
    StorageUnavailableError,
    ValidationError,
)


@pytest.fixture
def directory(service: ProfileService, make_form) -> ProfileService:
    """Service pre-loaded with three profiles."""
    service.create_profile(make_form(
        "ana@example.com", name="Ana Lima", description="Frontend developer",
        address={"city": "Porto", "state": "Norte", "country": "Portugal"},
        interests=["a", "b"],
    ))
    service.create_profile(make_form(
        "ben@example.com", name="Ben Okafor", description="Backend engineer",
        address={"city": "Lagos", "state": "Lagos", "country": "Nigeria"},
        interests=["b", "c"],
    ))
    service.create_profile(make_form(
        "cy@example.com", name="Cy Park", description="Designer who codes",
        address={"city": "Seoul", "state": "Seoul", "country": "South Korea"},
        interests=["a", "c", "a"],
    ))
    return service


class TestParseProfileId:
    """Tests for parse_profile_id."""

    @pytest.mark.parametrize("raw, expected", [
        ("1", 1), (" 42 ", 42), (7, 7), ("2147483647", 2147483647),
    ])
    def test_valid(self, raw, expected) -> None:
        assert parse_profile_id(raw) == expected

    @pytest.mark.parametrize("raw", [
        "abc", "", "0", "-3", "1.5", "12abc", "2147483648", None, 0, -1, True, 1.0,
    ])
    def test_invalid(self, raw) -> None:
        assert parse_profile_id(raw) is None


class TestQueryProfiles:
    """Tests for query_profiles."""

    def test_no_filters_returns_everything_by_name(self, directory: ProfileService) -> None:
        profiles = directory.query_profiles()

        assert [p.name for p in profiles] == ["Ana Lima", "Ben Okafor", "Cy Park"]

    def test_sort_descending(self, directory: ProfileService) -> None:
        profiles = directory.query_profiles({"sortBy": "name", "sortOrder": "desc"})

        assert [p.name for p in profiles] == ["Cy Park", "Ben Okafor", "Ana Lima"]

    def test_unknown_sort_key_orders_by_name(self, directory: ProfileService) -> None:
        profiles = directory.query_profiles({"sortBy": "password"})

        assert [p.name for p in profiles] == ["Ana Lima", "Ben Okafor", "Cy Park"]

    def test_search_is_case_insensitive(self, directory: ProfileService) -> None:
        assert [p.name for p in directory.query_profiles({"searchTerm": "ENGINEER"})] == ["Ben Okafor"]
        assert [p.name for p in directory.query_profiles({"searchTerm": "park"})] == ["Cy Park"]

    def test_non_matching_search_is_empty(self, directory: ProfileService) -> None:
        assert directory.query_profiles(ProfileFilters(search_term="astronaut")) == []

    def test_location_filter(self, directory: ProfileService) -> None:
        profiles = directory.query_profiles({"location": "korea"})

        assert [p.name for p in profiles] == ["Cy Park"]

    def test_interest_containment(self, directory: ProfileService) -> None:
        """All listed interests must be present, not just one of them."""
        assert [p.name for p in directory.query_profiles({"interests": ["a"]})] == ["Ana Lima", "Cy Park"]
        assert [p.name for p in directory.query_profiles({"interests": ["a", "b"]})] == ["Ana Lima"]
        assert directory.query_profiles({"interests": ["a", "z"]}) == []

    def test_empty_interest_list_is_no_filter(self, directory: ProfileService) -> None:
        assert len(directory.query_profiles({"interests": []})) == 3

    def test_filters_combine(self, directory: ProfileService) -> None:
        profiles = directory.query_profiles({"interests": ["c"], "searchTerm": "e", "location": "lagos"})

        assert [p.name for p in profiles] == ["Ben Okafor"]

    def test_storage_failure_propagates(self) -> None:
        """A failing store raises rather than returning an empty list."""
        repo = MagicMock()
        repo.find.side_effect = StorageUnavailableError("down")

        with pytest.raises(StorageUnavailableError):
            ProfileService(repo=repo).query_profiles()


class TestGetProfileById:
    """Tests for get_profile_by_id."""

    def test_malformed_id_is_not_found(self, directory: ProfileService) -> None:
        assert directory.get_profile_by_id("abc") is None

    def test_unknown_id_is_not_found(self, directory: ProfileService) -> None:
        assert directory.get_profile_by_id("999") is None

    def test_string_and_int_ids(self, directory: ProfileService) -> None:
        assert directory.get_profile_by_id("2").name == "Ben Okafor"
        assert directory.get_profile_by_id(2).name == "Ben Okafor"


class TestCreateProfile:
    """Tests for create_profile."""

    def test_round_trip(self, service: ProfileService, sample_form: dict) -> None:
        """A created profile reads back equal to the input."""
        created = service.create_profile(sample_form)
        fetched = service.get_profile_by_id(str(created.id))

        assert fetched == created
        assert fetched.name == sample_form["name"]
        assert fetched.photo == sample_form["photo"]
        assert fetched.description == sample_form["description"]
        assert fetched.address == Address.from_dict(sample_form["address"])
        assert fetched.contact_info == ContactInfo.from_dict(sample_form["contactInfo"])
        assert fetched.interests == sample_form["interests"]
        assert fetched.address.latitude == pytest.approx(37.7749)
        assert fetched.created_at == fetched.updated_at

    def test_accepts_profile_input(self, service: ProfileService) -> None:
        data = ProfileInput(
            name="N", description="D", address=Address(city="Oslo"),
            contact_info=ContactInfo(email="n@example.com"),
        )

        created = service.create_profile(data)

        assert created.id == 1
        assert created.contact_info.phone is None
        assert created.interests == []

    def test_missing_email_writes_nothing(self, service: ProfileService, sample_form: dict) -> None:
        del sample_form["contactInfo"]["email"]

        with pytest.raises(ValidationError) as exc:
            service.create_profile(sample_form)

        assert exc.value.fields == ["contact_info.email"]
        assert service.repo.count() == 0

    def test_reports_every_missing_field(self, service: ProfileService) -> None:
        with pytest.raises(ValidationError) as exc:
            service.create_profile({"name": " "})

        assert exc.value.fields == ["name", "description", "address", "contact_info.email"]

    @pytest.mark.parametrize("address, field", [
        ({"latitude": 90.5}, "address.latitude"),
        ({"latitude": -91}, "address.latitude"),
        ({"longitude": 180.01}, "address.longitude"),
        ({"latitude": "not a number"}, "address.latitude"),
    ])
    def test_rejects_out_of_range_coordinates(self, service, make_form, address, field) -> None:
        with pytest.raises(ValidationError) as exc:
            service.create_profile(make_form("x@example.com", address=address))

        assert exc.value.fields == [field]
        assert service.repo.count() == 0

    def test_duplicate_email(self, service: ProfileService, sample_form: dict) -> None:
        service.create_profile(sample_form)

        with pytest.raises(DuplicateEmailError) as exc:
            service.create_profile(sample_form)

        assert exc.value.email == "priya@example.com"
        assert service.repo.count() == 1

    def test_publishes_listing_and_detail_keys(self, service, events, sample_form) -> None:
        created = service.create_profile(sample_form)

        assert events == [InvalidationEvent(("profiles", f"profiles/{created.id}"), "create")]

    def test_no_event_on_failure(self, service, events) -> None:
        with pytest.raises(ValidationError):
            service.create_profile({})

        assert events == []


class TestUpdateProfile:
    """Tests for update_profile."""

    def test_replaces_whole_record(self, service, sample_form, make_form) -> None:
        """Optional fields left out of the form are cleared."""
        created = service.create_profile(sample_form)
        form = make_form("priya@example.com", name="Priya R.", interests=["Go"])
        del form["photo"]
        del form["contactInfo"]["phone"]

        updated = service.update_profile(str(created.id), form)

        assert updated.name == "Priya R."
        assert updated.photo == ""
        assert updated.contact_info.phone is None
        assert updated.contact_info.website == "https://priya.dev"
        assert updated.interests == ["Go"]
        assert service.get_profile_by_id(created.id) == updated

    def test_updated_at_never_decreases(self, make_form) -> None:
        """Even with a clock that goes backwards, updated_at holds or advances."""
        base = datetime(2025, 3, 1, tzinfo=timezone.utc)
        ticks = iter([base, base + timedelta(seconds=5), base - timedelta(hours=1)])
        service = ProfileService(repo=InMemoryProfileRepository(clock=lambda: next(ticks)))

        created = service.create_profile(make_form("t@example.com"))
        first = service.update_profile(created.id, make_form("t@example.com"))
        second = service.update_profile(created.id, make_form("t@example.com"))

        assert created.updated_at <= first.updated_at <= second.updated_at
        assert first.created_at == created.created_at

    def test_unknown_id(self, service, sample_form) -> None:
        with pytest.raises(ProfileNotFoundError):
            service.update_profile("41", sample_form)

    def test_malformed_id(self, service, sample_form) -> None:
        with pytest.raises(ProfileNotFoundError):
            service.update_profile("abc", sample_form)

    def test_validation_runs_before_lookup(self, service) -> None:
        with pytest.raises(ValidationError):
            service.update_profile("1", {"name": "only a name"})

    def test_email_taken_by_another_profile(self, service, make_form) -> None:
        service.create_profile(make_form("one@example.com"))
        second = service.create_profile(make_form("two@example.com"))

        with pytest.raises(DuplicateEmailError):
            service.update_profile(second.id, make_form("one@example.com"))

    def test_keeping_own_email_is_allowed(self, service, make_form) -> None:
        created = service.create_profile(make_form("one@example.com"))

        assert service.update_profile(created.id, make_form("one@example.com")).id == created.id

    def test_publishes_listing_and_detail_keys(self, service, events, sample_form) -> None:
        created = service.create_profile(sample_form)
        events.clear()

        service.update_profile(created.id, sample_form)

        assert events == [InvalidationEvent(("profiles", f"profiles/{created.id}"), "update")]


class TestDeleteProfile:
    """Tests for delete_profile."""

    def test_missing_id_is_soft_failure(self, service, events) -> None:
        assert service.delete_profile("12") == {"success": False}
        assert service.delete_profile("abc") == {"success": False}
        assert events == []

    def test_delete_then_get(self, service, sample_form, events) -> None:
        created = service.create_profile(sample_form)
        events.clear()

        assert service.delete_profile(str(created.id)) == {"success": True}
        assert service.get_profile_by_id(created.id) is None
        assert events == [InvalidationEvent(("profiles", f"profiles/{created.id}"), "delete")]

    def test_ids_are_not_reused(self, service, make_form) -> None:
        first = service.create_profile(make_form("a@example.com"))
        service.delete_profile(first.id)

        second = service.create_profile(make_form("a@example.com"))

        assert second.id > first.id

    def test_storage_failure_still_raises(self) -> None:
        repo = MagicMock()
        repo.delete.side_effect = StorageUnavailableError("down")

        with pytest.raises(StorageUnavailableError):
            ProfileService(repo=repo).delete_profile("1")


class TestGetFilterOptions:
    """Tests for get_filter_options."""

    def test_distinct_sorted_values(self, directory: ProfileService) -> None:
        options = directory.get_filter_options()

        assert options == {
            "locations": ["Lagos, Lagos, Nigeria", "Porto, Norte, Portugal", "Seoul, Seoul, South Korea"],
            "interests": ["a", "b", "c"],
        }

    def test_empty_directory(self, service: ProfileService) -> None:
        assert service.get_filter_options() == {"locations": [], "interests": []}

    def test_vocabulary_is_advisory(self, directory: ProfileService) -> None:
        """Filtering on a value outside the vocabulary still works."""
        assert directory.query_profiles({"location": "Atlantis"}) == []
