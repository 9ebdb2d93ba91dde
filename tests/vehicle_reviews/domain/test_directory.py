"""Tests for the in-memory directory and its factory."""

import pytest

from vehicle_reviews.directory import get_directory, reset_directory, set_directory
from vehicle_reviews.directory.fake_adapter import InMemoryDirectory, LookupUnavailable


class TestInMemoryDirectory:
    def test_profile_lookup(self):
        directory = InMemoryDirectory()
        directory.add_user("u-1", "Ada", avatar="https://img.example.com/ada.png")
        assert directory.get_profile("u-1").display_name == "Ada"
        assert directory.get_profile("u-2") is None

    def test_vehicle_lookup(self):
        directory = InMemoryDirectory()
        directory.add_vehicle("v-1", "2019 Mazda 3", slug="2019-mazda-3")
        assert directory.get_vehicle("v-1").to_dict() == {
            "id": "v-1",
            "title": "2019 Mazda 3",
            "slug": "2019-mazda-3",
            "thumbnail": None,
        }

    def test_moderator_roster(self):
        directory = InMemoryDirectory()
        directory.grant_moderator("mod-1")
        assert directory.is_moderator("mod-1") is True
        assert directory.is_moderator("user-1") is False
        assert directory.is_moderator(None) is False
        directory.revoke_moderator("mod-1")
        assert directory.is_moderator("mod-1") is False

    def test_failing_lookups(self):
        directory = InMemoryDirectory()
        directory.fail_lookups = True
        with pytest.raises(LookupUnavailable):
            directory.get_profile("u-1")


class TestFactory:
    def test_defaults_to_memory(self, monkeypatch):
        monkeypatch.delenv("REVIEWS_DIRECTORY_ADAPTER", raising=False)
        reset_directory()
        assert isinstance(get_directory(), InMemoryDirectory)

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("REVIEWS_DIRECTORY_ADAPTER", "ldap")
        reset_directory()
        with pytest.raises(ValueError):
            get_directory()

    def test_override(self):
        directory = InMemoryDirectory()
        set_directory(directory)
        assert get_directory() is directory
