"""Unit tests for pm_gateway request schemas."""

import pytest
from pydantic import ValidationError

from src.pm_gateway.user.schemas import UpdateProfileRequest


class TestUpdateProfileRequest:
    def test_valid_username(self) -> None:
        assert UpdateProfileRequest(username="trader_1").username == "trader_1"

    def test_null_clears(self) -> None:
        assert UpdateProfileRequest(username=None).username is None

    def test_missing_field_clears(self) -> None:
        assert UpdateProfileRequest().username is None

    @pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
    def test_blank_clears(self, blank: str) -> None:
        assert UpdateProfileRequest(username=blank).username is None

    def test_surrounding_whitespace_trimmed(self) -> None:
        assert UpdateProfileRequest(username="  trader_1 ").username == "trader_1"

    def test_too_short_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UpdateProfileRequest(username="ab")

    def test_bad_characters_rejected(self) -> None:
        with pytest.raises(ValidationError):
            UpdateProfileRequest(username="bad name!")

    def test_from_json_body(self) -> None:
        assert UpdateProfileRequest.model_validate({"username": ""}).username is None
