"""Tests for the error taxonomy and HTTP status classification."""

import pytest

from openrouter_client.errors import (
    AuthenticationError,
    ClientError,
    ErrorKind,
    ModelNotFoundError,
    NetworkError,
    ProviderHTTPError,
    RateLimitError,
    ResponseError,
    ValidationError,
    error_from_response,
    is_number,
)


class TestErrorFromResponse:
    """Tests for error_from_response()."""

    def test_401_authentication(self) -> None:
        err = error_from_response(401, {"error": {"message": "No auth credentials found"}})
        assert isinstance(err, AuthenticationError)
        assert err.kind == ErrorKind.AUTHENTICATION
        assert err.message == "No auth credentials found"
        assert err.retryable is False

    def test_429_rate_limit_with_snake_case_hint(self) -> None:
        err = error_from_response(429, {"error": "slow down", "retry_after": 7})
        assert isinstance(err, RateLimitError)
        assert err.retry_after == 7.0
        assert err.retryable is True

    def test_429_rate_limit_with_camel_case_hint(self) -> None:
        err = error_from_response(429, {"retryAfter": 2.5})
        assert isinstance(err, RateLimitError)
        assert err.retry_after == 2.5

    def test_429_rate_limit_without_hint(self) -> None:
        err = error_from_response(429, {"retry_after": "soon"})
        assert isinstance(err, RateLimitError)
        assert err.retry_after is None

    def test_400_validation_errors(self) -> None:
        err = error_from_response(
            400, {"message": "bad request", "errors": ["temperature too high", 3]}
        )
        assert isinstance(err, ValidationError)
        assert err.details == ["temperature too high"]
        assert err.retryable is False

    def test_400_validation_errors_alternate_key(self) -> None:
        err = error_from_response(400, {"validation_errors": ["a", "b"]})
        assert isinstance(err, ValidationError)
        assert err.details == ["a", "b"]

    def test_404_model_not_found(self) -> None:
        err = error_from_response(404, {"error": "no such model", "model": "x/y"})
        assert isinstance(err, ModelNotFoundError)
        assert err.model_name == "x/y"
        assert err.retryable is False

    def test_404_model_name_alternate_key_and_default(self) -> None:
        assert error_from_response(404, {"model_name": "a/b"}).model_name == "a/b"
        err = error_from_response(404, {})
        assert err.model_name == "unknown"
        assert err.message == "Model not found"

    @pytest.mark.parametrize("status", [500, 502, 503, 504])
    def test_5xx_generic_retryable(self, status: int) -> None:
        err = error_from_response(status, {})
        assert isinstance(err, ProviderHTTPError)
        assert err.status_code == status
        assert err.retryable is True
        assert err.message == "HTTP error {}".format(status)

    @pytest.mark.parametrize("status", [402, 403, 408, 422])
    def test_other_4xx_generic_not_retryable(self, status: int) -> None:
        err = error_from_response(status, {"error": "nope"})
        assert isinstance(err, ProviderHTTPError)
        assert err.kind == ErrorKind.HTTP
        assert err.retryable is False
        assert err.message == "nope"

    @pytest.mark.parametrize("body", [None, "oops", [1, 2], 42])
    def test_tolerates_non_object_body(self, body) -> None:
        err = error_from_response(401, body)
        assert isinstance(err, AuthenticationError)
        assert err.message == "Unknown error occurred"


class TestErrorValues:
    """Tests for the retryable flag and serialization of each kind."""

    def test_retryable_flags(self) -> None:
        assert NetworkError("down").retryable is True
        assert ResponseError("bad").retryable is False
        assert ValidationError("bad").retryable is False

    def test_all_kinds_are_client_errors(self) -> None:
        for err in (
            AuthenticationError(),
            RateLimitError(),
            ValidationError("x"),
            ModelNotFoundError("x"),
            NetworkError("x"),
            ResponseError("x"),
            ProviderHTTPError("x", 500),
        ):
            assert isinstance(err, ClientError)

    def test_to_dict(self) -> None:
        data = ValidationError("bad", ["a"]).to_dict()
        assert data == {
            "kind": "VALIDATION_ERROR",
            "message": "bad",
            "status_code": 400,
            "retryable": False,
            "details": ["a"],
        }

    def test_network_error_keeps_cause(self) -> None:
        cause = ConnectionRefusedError("refused")
        err = NetworkError("down", cause=cause)
        assert err.cause is cause
        assert err.to_dict()["cause"] == "ConnectionRefusedError"

    def test_response_error_keeps_raw_payload_out_of_dict(self) -> None:
        err = ResponseError("bad", raw_response={"secret": "content"})
        assert err.raw_response == {"secret": "content"}
        assert "raw_response" not in err.to_dict()


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, True),
        (3, True),
        (2.5, True),
        (True, False),
        ("3", False),
        (None, False),
        (float("nan"), False),
        (float("inf"), False),
        (float("-inf"), False),
    ],
)
def test_is_number(value, expected: bool) -> None:
    assert is_number(value) is expected


def test_non_finite_retry_after_ignored() -> None:
    err = error_from_response(429, {"retry_after": float("inf")})
    assert err.retry_after is None
