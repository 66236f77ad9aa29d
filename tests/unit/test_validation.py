"""
Unit tests for input validation.
"""

import pytest

from datalayer.utils.validation import (
    validate_backend_name,
    validate_key,
    validate_quota,
    validate_string,
)


class TestValidation:
    """Tests for tuple-returning validators."""

    def test_string(self):
        assert validate_string("abc", "name") == (True, "")
        assert not validate_string(3, "name")[0]
        assert not validate_string("abc", "name", max_length=2)[0]
        assert not validate_string("abc", "name", pattern=r"^\d+$")[0]

    def test_key(self):
        assert validate_key("a")[0]
        assert validate_key("") == (False, "key must not be empty")
        assert not validate_key(None)[0]
        assert not validate_key(5)[0]

    def test_long_key(self):
        """Key length is bounded only by the namespace quota."""
        assert validate_key("k" * 10_000) == (True, "")

    def test_backend_name(self):
        valid = ("localStorage", "sessionStorage")
        assert validate_backend_name("localStorage", valid)[0]

        ok, err = validate_backend_name("x", valid)
        assert not ok
        assert err == (
            "'x' is an invalid local storage backend."
            " Valid backends are: localStorage, sessionStorage"
        )

    def test_quota(self):
        assert validate_quota(None)[0]
        assert validate_quota(1)[0]
        assert not validate_quota(0)[0]
        assert not validate_quota(True)[0]
        assert not validate_quota("10")[0]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
