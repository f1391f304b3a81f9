"""
Tests for figs.env module.

Tests the typed environment overlay including:
- String and typed set/get
- Deletion and stale overlay pruning
- Case-insensitive lookup modes
- Symbolic accessor names and attribute access
- require_keys
"""

from __future__ import annotations

import os

import pytest

from figs.env import ENV, LookupMode, TypedStore, require_keys, to_native
from figs.exceptions import FigsError, MissingKeyError


class TestSetAndGet:
    """Tests for typed writes and reads."""

    def test_string_pair_stays_native(self, store):
        """Test that str/str entries do not touch the overlay."""
        store.set("FOO", "bar")

        assert store.get("FOO") == "bar"
        assert store.native["FOO"] == "bar"
        assert "FOO" not in store.overlay

    @pytest.mark.parametrize(
        ("value", "native"),
        [
            (True, "true"),
            (False, "false"),
            (42, "42"),
            (1.5, "1.5"),
            (["a", "b"], '["a", "b"]'),
            ({"x": 1}, '{"x": 1}'),
            (None, ""),
        ],
    )
    def test_typed_value_preserved(self, store, value, native):
        """Test that non-string values come back with their type."""
        store.set("VALUE", value)

        assert store.get("VALUE") == value
        assert type(store.get("VALUE")) is type(value)
        assert store.native["VALUE"] == native

    def test_non_string_key_preserved(self, store):
        """Test that a non-string key is stringified natively but kept in the overlay."""
        store.set(8080, "port")

        assert store.native["8080"] == "port"
        assert store.get(8080) == "port"
        assert store.get("8080") == "port"
        assert 8080 in store.overlay

    def test_string_overwrite_replaces_typed_value(self, store):
        """Test that rewriting a typed key with a plain string clears the overlay."""
        store.set("FLAG", True)
        store.set("FLAG", "no")

        assert store.native["FLAG"] == "no"
        assert store.get("FLAG") == "no"
        assert "FLAG" not in store.overlay

    def test_item_access_aliases(self, store):
        """Test that [] get/set/delete and 'in' map onto the store operations."""
        store["RETRIES"] = 3

        assert store["RETRIES"] == 3
        assert "RETRIES" in store

        del store["RETRIES"]

        assert "RETRIES" not in store
        assert store["RETRIES"] is None

    def test_none_value_is_still_a_member(self, store):
        """Test that a key set to None counts as present."""
        store.set("FOO", None)

        assert "FOO" in store
        assert store.get("FOO") is None

    def test_membership_prunes_stale_overlay(self, store):
        store.set("FOO", 1)
        del store.native["FOO"]

        assert "FOO" not in store
        assert "FOO" not in store.overlay

    def test_unset_key_returns_none(self, store):
        assert store.get("NOPE") is None


class TestDelete:
    """Tests for deletion and overlay staleness."""

    def test_delete_removes_from_both_maps(self, store):
        """Test that delete clears the native and overlay entries."""
        store.set("DEBUG", True)

        store.delete("DEBUG")

        assert "DEBUG" not in store.native
        assert "DEBUG" not in store.overlay
        assert store.get("DEBUG") is None

    def test_delete_missing_key_is_silent(self, store):
        store.delete("NEVER_SET")

        assert store.get("NEVER_SET") is None

    def test_external_removal_prunes_overlay(self, store):
        """Test that removing the native entry directly drops the overlay entry."""
        store.set("WORKERS", 4)
        del store.native["WORKERS"]

        # Any read sweeps stale entries, not only a read of the same key
        store.get("SOMETHING_ELSE")

        assert "WORKERS" not in store.overlay
        assert store.get("WORKERS") is None

    def test_external_rewrite_keeps_overlay(self, store):
        """Test that the overlay only follows presence of the native key."""
        store.set("WORKERS", 4)
        store.native["WORKERS"] = "5"

        assert store.get("WORKERS") == 4


class TestLookup:
    """Tests for case-insensitive lookup modes."""

    def test_plain_lookup_is_case_insensitive(self, store):
        store.set("Database_Url", "postgres://db")

        assert store.lookup("database_url") == "postgres://db"
        assert store.lookup("DATABASE_URL") == "postgres://db"

    def test_plain_lookup_missing_returns_none(self, store):
        assert store.lookup("missing") is None

    def test_overlay_match_preferred(self, store):
        """Test that an overlay key match wins over a native key match."""
        store.native["PORT"] = "80"
        store.set("port", 8080)

        assert store.lookup("PORT") == 8080

    def test_required_returns_value(self, store):
        store.set("SECRET", "s3cr3t")

        assert store.lookup("secret", LookupMode.REQUIRED) == "s3cr3t"

    def test_required_missing_raises(self, store):
        """Test that REQUIRED raises MissingKeyError naming the key."""
        with pytest.raises(MissingKeyError, match="SECRET") as exc_info:
            store.lookup("secret", LookupMode.REQUIRED)

        assert exc_info.value.keys == ("SECRET",)
        assert isinstance(exc_info.value, FigsError)
        assert isinstance(exc_info.value, KeyError)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("yes", True),
            (True, True),
            (0, True),
            (["x"], True),
            ("", False),
            (False, False),
            ([], False),
        ],
    )
    def test_boolean_mode(self, store, value, expected):
        """Test that BOOLEAN is True only for present, non-empty values."""
        store.set("FLAG", value)

        assert store.lookup("flag", LookupMode.BOOLEAN) is expected

    def test_boolean_mode_missing(self, store):
        assert store.lookup("flag", LookupMode.BOOLEAN) is False


class TestDynamicAccess:
    """Tests for symbolic accessor names."""

    def test_bang_suffix(self, store):
        store.set("API_TOKEN", "abc")

        assert store.dynamic("api_token!") == "abc"
        with pytest.raises(MissingKeyError, match="OTHER_TOKEN"):
            store.dynamic("other_token!")

    def test_question_suffix(self, store):
        store.set("DEBUG", True)

        assert store.dynamic("debug?") is True
        assert store.dynamic("verbose?") is False

    def test_bare_name(self, store):
        store.set("WORKERS", 4)

        assert store.dynamic("workers") == 4
        assert store.dynamic("missing") is None

    def test_bare_name_passes_through_native_attribute(self, store):
        """Test that unmatched names of native mapping methods are returned."""
        store.set("A", "1")

        keys = store.dynamic("keys")

        assert callable(keys)
        assert list(keys()) == ["A"]

    def test_attribute_access(self, store):
        store.set("WORKERS", 4)

        assert store.workers == 4
        assert store.missing_setting is None
        assert getattr(store, "workers?") is True
        with pytest.raises(MissingKeyError):
            getattr(store, "missing_setting!")

    def test_private_attributes_are_not_looked_up(self, store):
        store.native["_HIDDEN"] = "x"

        with pytest.raises(AttributeError):
            store._hidden

    def test_responds_to(self, store):
        """Test that responds_to mirrors which names resolve without raising."""
        store.native["API_TOKEN"] = "abc"

        assert store.responds_to("anything") is True
        assert store.responds_to("anything?") is True
        assert store.responds_to("api_token!") is True
        assert store.responds_to("other_token!") is False
        assert store.responds_to("items") is True


class TestRequireKeys:
    """Tests for require_keys."""

    def test_has_key_is_case_insensitive(self, store):
        store.set("Api_Token", "abc")
        store.set("RETRIES", 0)

        assert store.has_key("API_TOKEN")
        assert store.has_key("retries")
        assert not store.has_key("other")

    def test_all_present(self, store):
        store.set("A", "1")
        store.set("b", 2)

        require_keys("a", "B", store=store)

    def test_lists_every_missing_key(self, store):
        store.set("A", "1")

        with pytest.raises(MissingKeyError) as exc_info:
            require_keys("a", "b", "c", store=store)

        assert exc_info.value.keys == ("B", "C")
        assert "B, C" in str(exc_info.value)


class TestProcessEnvironment:
    """Tests for the process-wide ENV store."""

    def test_env_writes_through_to_os_environ(self, monkeypatch):
        monkeypatch.delenv("FIGS_TEST_WORKERS", raising=False)
        try:
            ENV.set("FIGS_TEST_WORKERS", 3)

            assert os.environ["FIGS_TEST_WORKERS"] == "3"
            assert ENV.get("FIGS_TEST_WORKERS") == 3
        finally:
            ENV.delete("FIGS_TEST_WORKERS")

        assert "FIGS_TEST_WORKERS" not in os.environ

    def test_default_native_is_os_environ(self):
        assert TypedStore().native is os.environ


def test_to_native_leaves_strings_alone():
    assert to_native("plain") == "plain"
