"""Tests for pm_common.errors and pm_common.response."""

from unittest.mock import MagicMock

from src.pm_common.errors import (
    AlreadyResolvedError,
    AppError,
    BalanceNotFoundError,
    InsufficientFundsError,
    InvalidArgumentError,
    InvalidStatusTransitionError,
    MarketClosedError,
    MarketNotFoundError,
    PositionNotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    UnauthorizedError,
)
from src.pm_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_auth_errors(self) -> None:
        assert UnauthenticatedError().code == 1001
        assert UnauthenticatedError().http_status == 401
        assert UnauthorizedError().code == 1002
        assert UnauthorizedError().http_status == 403

    def test_insufficient_funds_names_amounts(self) -> None:
        err = InsufficientFundsError(required=1100, available=450)
        assert err.code == 2001
        assert err.http_status == 422
        assert "1100" in err.message
        assert "450" in err.message

    def test_balance_not_found(self) -> None:
        err = BalanceNotFoundError("user-1")
        assert err.code == 2002
        assert err.http_status == 404

    def test_position_not_found(self) -> None:
        err = PositionNotFoundError("MKT-1")
        assert err.code == 2003
        assert err.http_status == 404
        assert "MKT-1" in err.message

    def test_market_errors(self) -> None:
        assert MarketNotFoundError("MKT-1").http_status == 404
        assert MarketClosedError("MKT-1").code == 3002
        assert AlreadyResolvedError("MKT-1").http_status == 409
        err = InvalidStatusTransitionError("open", "resolved")
        assert err.code == 3004
        assert "open" in err.message and "resolved" in err.message

    def test_invalid_argument(self) -> None:
        err = InvalidArgumentError("shares must be positive")
        assert err.code == 4001
        assert err.http_status == 400
        assert "shares must be positive" in err.message

    def test_store_unavailable(self) -> None:
        err = StoreUnavailableError()
        assert err.code == 9001
        assert err.http_status == 503


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"id": "MKT-1"})
        assert isinstance(resp, ApiResponse)
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": "MKT-1"}
        assert resp.request_id.startswith("req_")

    def test_error_response_has_null_data(self) -> None:
        resp = error_response(3001, "Market not found: MKT-1")
        assert resp.code == 3001
        assert resp.data is None

    def test_request_id_copied_from_request_state(self) -> None:
        request = MagicMock()
        request.state.request_id = "req_abc123"
        assert success_response(None, request).request_id == "req_abc123"
        assert error_response(1001, "x", request).request_id == "req_abc123"
