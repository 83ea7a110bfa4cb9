"""Error taxonomy for the OpenRouter chat client.

Every failure the client can report is one of a closed set of kinds. Each
error carries a ``retryable`` flag fixed at construction time; the retry
orchestrator consults only that flag. Provider responses are classified
exactly once, at the transport boundary, by error_from_response().
"""

import math
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """The kind of a ClientError, for callers that dispatch on it."""

    AUTHENTICATION = "AUTHENTICATION_ERROR"
    RATE_LIMIT = "RATE_LIMIT_ERROR"
    VALIDATION = "VALIDATION_ERROR"
    MODEL_NOT_FOUND = "MODEL_NOT_FOUND"
    NETWORK = "NETWORK_ERROR"
    RESPONSE = "RESPONSE_ERROR"
    HTTP = "HTTP_ERROR"


class ClientError(Exception):
    """Base class for every error reported by the client."""

    kind: ErrorKind = ErrorKind.HTTP

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        retryable: bool = False,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.retryable = retryable
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for logs and JSON envelopes."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
            "retryable": self.retryable,
        }


class AuthenticationError(ClientError):
    """Bad or expired credential (HTTP 401). Never retried."""

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Authentication failed. Invalid API key.") -> None:
        super().__init__(message, status_code=401, retryable=False)


class RateLimitError(ClientError):
    """Provider throttling (HTTP 429). Retried with backoff."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(
        self,
        message: str = "Rate limit exceeded.",
        retry_after: Optional[float] = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, status_code=429, retryable=True)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["retry_after"] = self.retry_after
        return data


class ValidationError(ClientError):
    """Malformed request, caught locally or rejected by the provider (HTTP 400)."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, details: Optional[List[str]] = None) -> None:
        self.details: List[str] = list(details or [])
        super().__init__(message, status_code=400, retryable=False)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["details"] = list(self.details)
        return data


class ModelNotFoundError(ClientError):
    """Unknown model identifier (HTTP 404). Never retried."""

    kind = ErrorKind.MODEL_NOT_FOUND

    def __init__(self, message: str, model_name: str = "unknown") -> None:
        self.model_name = model_name
        super().__init__(message, status_code=404, retryable=False)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["model_name"] = self.model_name
        return data


class NetworkError(ClientError):
    """Timeout or connection-level failure. Retried."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message, retryable=True)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["cause"] = type(self.cause).__name__ if self.cause is not None else None
        return data


class ResponseError(ClientError):
    """Success-path payload that does not match the response contract."""

    kind = ErrorKind.RESPONSE

    def __init__(self, message: str, raw_response: Any = None) -> None:
        self.raw_response = raw_response
        super().__init__(message, retryable=False)


class ProviderHTTPError(ClientError):
    """Any other non-2xx status. Retryable only for server errors."""

    kind = ErrorKind.HTTP

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(
            message,
            status_code=status_code,
            retryable=status_code >= 500 or status_code == 503,
        )


def error_from_response(status: int, body: Any) -> ClientError:
    """Classify a non-2xx provider response into the error taxonomy.

    Args:
        status: The HTTP status code.
        body: The best-effort parsed error body (any JSON value, or {}).

    Returns:
        The matching ClientError subclass instance.
    """
    message = _extract_message(body)

    if status == 401:
        return AuthenticationError(message)

    if status == 429:
        return RateLimitError(message, retry_after=_extract_retry_after(body))

    if status == 400:
        return ValidationError(message, _extract_validation_errors(body))

    if status == 404:
        if message == _UNKNOWN_MESSAGE:
            message = "Model not found"
        return ModelNotFoundError(message, _extract_model_name(body))

    if message == _UNKNOWN_MESSAGE:
        message = "HTTP error {}".format(status)
    return ProviderHTTPError(message, status)


_UNKNOWN_MESSAGE = "Unknown error occurred"


def is_number(value: Any) -> bool:
    """Return True for a finite int or float; bools, NaN and infinities are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _extract_message(body: Any) -> str:
    if not isinstance(body, dict):
        return _UNKNOWN_MESSAGE

    if isinstance(body.get("error"), str):
        return body["error"]

    if isinstance(body.get("message"), str):
        return body["message"]

    error = body.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]

    return _UNKNOWN_MESSAGE


def _extract_retry_after(body: Any) -> Optional[float]:
    if not isinstance(body, dict):
        return None

    for key in ("retry_after", "retryAfter"):
        if is_number(body.get(key)):
            return float(body[key])

    return None


def _extract_validation_errors(body: Any) -> List[str]:
    if not isinstance(body, dict):
        return []

    for key in ("errors", "validation_errors"):
        if isinstance(body.get(key), list):
            return [e for e in body[key] if isinstance(e, str)]

    return []


def _extract_model_name(body: Any) -> str:
    if not isinstance(body, dict):
        return "unknown"

    for key in ("model", "model_name"):
        if isinstance(body.get(key), str):
            return body[key]

    return "unknown"
