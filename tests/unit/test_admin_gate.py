"""Unit tests for the administrator check."""

from unittest.mock import patch

from src.pm_gateway.auth.admin_gate import is_admin, is_admin_email, parse_admin_allowlist
from src.pm_gateway.user.db_models import UserModel


def _make_user(email: str, role: str = "trader") -> UserModel:
    user = UserModel()
    user.email = email
    user.role = role
    return user


class TestParseAdminAllowlist:
    def test_trims_lowercases_and_drops_empties(self) -> None:
        assert parse_admin_allowlist(" A@x.com, b@Y.com ,, ") == ["a@x.com", "b@y.com"]

    def test_empty(self) -> None:
        assert parse_admin_allowlist("") == []


class TestIsAdminEmail:
    def test_case_insensitive_member(self) -> None:
        assert is_admin_email("Admin@Example.com", "admin@example.com")

    def test_exact_match_only(self) -> None:
        assert not is_admin_email("admin@example.com.evil", "admin@example.com")
        assert not is_admin_email("dmin@example.com", "admin@example.com")

    def test_missing_email(self) -> None:
        assert not is_admin_email(None, "admin@example.com")
        assert not is_admin_email("", "admin@example.com")

    def test_empty_allowlist_admits_nobody(self) -> None:
        assert not is_admin_email("admin@example.com", "")


class TestIsAdmin:
    def test_role_admin(self) -> None:
        with patch("src.pm_gateway.auth.admin_gate.settings.ADMIN_EMAILS", ""):
            assert is_admin(_make_user("root@example.com", role="admin"))

    def test_allowlisted_email(self) -> None:
        with patch("src.pm_gateway.auth.admin_gate.settings.ADMIN_EMAILS", "boss@example.com"):
            assert is_admin(_make_user("BOSS@example.com"))

    def test_plain_trader(self) -> None:
        with patch("src.pm_gateway.auth.admin_gate.settings.ADMIN_EMAILS", "boss@example.com"):
            assert not is_admin(_make_user("alice@example.com"))

    def test_allowlist_read_per_call(self) -> None:
        user = _make_user("alice@example.com")
        with patch("src.pm_gateway.auth.admin_gate.settings.ADMIN_EMAILS", "alice@example.com"):
            assert is_admin(user)
        with patch("src.pm_gateway.auth.admin_gate.settings.ADMIN_EMAILS", ""):
            assert not is_admin(user)
