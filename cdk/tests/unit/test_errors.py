"""Tests for stack configuration errors."""

import pytest

from goals_stack.errors import ErrorCode, StackConfigError


class TestStackConfigError:
    """Tests for StackConfigError class."""

    def test_attributes(self):
        error = StackConfigError(ErrorCode.INVALID_CONFIG, "bad value", {"field": "table_name"})

        assert error.error_code == "INVALID_CONFIG"
        assert error.message == "bad value"
        assert error.details == {"field": "table_name"}
        assert str(error) == "bad value"

    def test_details_default_to_empty(self):
        error = StackConfigError(ErrorCode.INVALID_PROJECT_NAME, "bad name")
        assert error.details == {}

    def test_to_dict(self):
        error = StackConfigError(ErrorCode.NAME_SPACE_EXHAUSTED, "none left", {"suffixRange": 10})

        assert error.to_dict() == {
            "errorCode": "NAME_SPACE_EXHAUSTED",
            "message": "none left",
            "suffixRange": 10,
        }

    def test_is_raised_as_exception(self):
        with pytest.raises(StackConfigError, match="boom"):
            raise StackConfigError(ErrorCode.INVALID_CONFIG, "boom")
