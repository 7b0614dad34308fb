"""Unit tests for domain invariant guards."""
import pytest

from habitkin.domain.invariant import (
    clamp,
    require_number,
    validate_owner,
    validate_not_archived,
    validate_weekdays,
)


class TestClamp:
    def test_inside(self):
        assert clamp(1.2, 0.5, 1.5) == 1.2

    def test_outside(self):
        assert clamp(3, 0.5, 1.5) == 1.5
        assert clamp(-1, 0.5, 1.5) == 0.5


class TestRequireNumber:
    def test_numeric_string_accepted(self):
        assert require_number("1.25", "x") == 1.25

    def test_inf_rejected(self):
        with pytest.raises(ValueError):
            require_number(float("inf"), "x")

    def test_none_rejected(self):
        with pytest.raises(ValueError):
            require_number(None, "x")


class TestOwnership:
    def test_owner_passes(self):
        validate_owner("u1", "u1")

    def test_other_user_denied(self):
        with pytest.raises(PermissionError):
            validate_owner("u1", "u2")


class TestArchived:
    def test_archived_rejected(self):
        with pytest.raises(ValueError):
            validate_not_archived(True)

    def test_active_passes(self):
        validate_not_archived(False)


class TestWeekdays:
    def test_none_passes_through(self):
        assert validate_weekdays(None) is None

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            validate_weekdays([True])
