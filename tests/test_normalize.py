"""
Tests for key normalization and predicate truthiness.

These tests verify that:
1. str and bytes keys normalize to the same canonical name
2. Non-textual keys are never keys
3. Only None and False are falsy for predicates
"""

import re

import pytest

from stricthash.normalize import is_public_identifier, is_truthy, normalize_key


class _Name(str):
    pass


# =============================================================================
# KEY NORMALIZATION TESTS
# =============================================================================

class TestNormalizeKey:
    """Test the single key normalization step."""

    def test_str_is_canonical(self):
        """Plain strings pass through unchanged."""
        assert normalize_key("a") == "a"

    def test_str_subclass_becomes_plain_str(self):
        """str subclasses are reduced to plain str."""
        key = normalize_key(_Name("a"))
        assert key == "a"
        assert type(key) is str

    def test_bytes_are_decoded(self):
        """ASCII bytes decode; anything else is not a key."""
        assert normalize_key(b"a") == "a"
        assert normalize_key(b"\xff") is None

    @pytest.mark.parametrize("key", [None, 1, re.compile("a"), ("a",), ["a"]])
    def test_other_types_are_not_keys(self, key):
        """Non-textual values normalize to None."""
        assert normalize_key(key) is None


class TestPublicIdentifier:
    """Test which names may be declared."""

    @pytest.mark.parametrize("name", ["a", "load_path", "none", "true"])
    def test_accepted(self, name):
        """Public, non-keyword identifiers are accepted."""
        assert is_public_identifier(name)

    @pytest.mark.parametrize("name", ["", "1a", "a-b", "None", "class", "_a", "__a__"])
    def test_rejected(self, name):
        """Keywords, private names and non-identifiers are rejected."""
        assert not is_public_identifier(name)


# =============================================================================
# TRUTHINESS TESTS
# =============================================================================

class TestIsTruthy:
    """Test predicate truthiness."""

    @pytest.mark.parametrize("value", [None, False])
    def test_falsy(self, value):
        """None and False are the only falsy values."""
        assert is_truthy(value) is False

    @pytest.mark.parametrize("value", [True, 0, 0.0, "", [], {}, set(), object()])
    def test_truthy(self, value):
        """Zero and empty containers are truthy, unlike bool()."""
        assert is_truthy(value) is True
