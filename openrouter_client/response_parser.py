"""Validation of successful provider responses.

Each required field is checked for presence and type before the typed
ChatResponse is built. Message content is returned as-is: when structured
output was requested, decoding the JSON inside it is the caller's job.
"""

from typing import Any

import pydantic

from openrouter_client.errors import ResponseError, is_number
from openrouter_client.models import ChatResponse


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def parse_response(raw: Any) -> ChatResponse:
    """Validate a raw 2xx body and return it as a ChatResponse.

    Args:
        raw: The decoded JSON body.

    Returns:
        The immutable, typed response.

    Raises:
        ResponseError: If any part of the response contract is violated.
    """
    if not isinstance(raw, dict):
        raise ResponseError("Invalid response: expected object", raw)

    if not isinstance(raw.get("id"), str):
        raise ResponseError("Invalid response: missing or invalid id field", raw)

    if not isinstance(raw.get("model"), str):
        raise ResponseError("Invalid response: missing or invalid model field", raw)

    if not is_number(raw.get("created")):
        raise ResponseError("Invalid response: missing or invalid created field", raw)

    choices = raw.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ResponseError("Invalid response: missing or empty choices array", raw)

    usage = raw.get("usage")
    if not isinstance(usage, dict):
        raise ResponseError("Invalid response: missing or invalid usage field", raw)

    if not all(
        _is_count(usage.get(key))
        for key in ("prompt_tokens", "completion_tokens", "total_tokens")
    ):
        raise ResponseError("Invalid response: invalid usage token counts", raw)

    first = choices[0]
    if (
        not isinstance(first, dict)
        or not is_number(first.get("index"))
        or not isinstance(first.get("message"), dict)
    ):
        raise ResponseError("Invalid response: invalid choice structure", raw)

    message = first["message"]
    if not isinstance(message.get("role"), str) or not isinstance(
        message.get("content"), str
    ):
        raise ResponseError("Invalid response: invalid message structure", raw)

    try:
        return ChatResponse.model_validate({**raw, "created": int(raw["created"])})
    except pydantic.ValidationError as exc:
        raise ResponseError(
            "Invalid response: {} field error(s)".format(exc.error_count()), raw
        ) from exc
