"""Request validation and wire-payload assembly.

All request checks run here, before any network attempt, so that caller
bugs fail fast as ValidationError and cost no provider round-trip.
"""

from typing import Any, Dict, List, Optional

from openrouter_client.config import PRESETS
from openrouter_client.errors import ValidationError
from openrouter_client.models import ChatMessage, ChatRequest
from openrouter_client.telemetry import logger

VALID_ROLES = ("system", "user", "assistant")

# Optional tuning knobs, copied to the payload only when set.
_TUNING_FIELDS = (
    "temperature",
    "max_tokens",
    "top_p",
    "frequency_penalty",
    "presence_penalty",
)


def validate_messages(messages: Optional[List[ChatMessage]]) -> None:
    """Check message roles, content and ordering.

    Raises:
        ValidationError: On the first rule the message list breaks.
    """
    if not messages:
        raise ValidationError(
            "messages array cannot be empty",
            ["messages: array must contain at least one message"],
        )

    system_count = 0
    user_count = 0

    for index, message in enumerate(messages):
        if message.role not in VALID_ROLES:
            raise ValidationError(
                "invalid message role at index {}".format(index),
                [
                    "message[{}].role must be one of: {}".format(
                        index, ", ".join(VALID_ROLES)
                    )
                ],
            )

        if not message.content or not message.content.strip():
            raise ValidationError(
                "empty message content at index {}".format(index),
                ["message[{}].content cannot be empty".format(index)],
            )

        if message.role == "system":
            system_count += 1
        elif message.role == "user":
            user_count += 1

    if system_count > 1:
        raise ValidationError(
            "multiple system messages not allowed",
            ["Only one system message is allowed per request"],
        )

    if system_count == 1 and messages[0].role != "system":
        raise ValidationError(
            "system message must be first",
            ["If a system message is present, it must be the first message"],
        )

    if user_count == 0:
        raise ValidationError(
            "at least one user message is required",
            ["Request must contain at least one user message"],
        )


def validate_response_format(response_format: Any) -> bool:
    """Pre-flight a structured-output response_format descriptor.

    Pure and network-free. A missing ``additionalProperties: false`` only
    logs a warning.

    Args:
        response_format: The response_format value, e.g.
            {"type": "json_schema", "json_schema": {"name": ..., "strict": True,
            "schema": {"type": "object", "properties": {...}}}}

    Returns:
        True if the descriptor is acceptable, False otherwise.
    """
    if not isinstance(response_format, dict):
        return False

    if response_format.get("type") != "json_schema":
        return False

    descriptor = response_format.get("json_schema")
    if not isinstance(descriptor, dict):
        return False

    name = descriptor.get("name")
    if not isinstance(name, str) or not name:
        return False

    # Exactly True; 1 or "true" are rejected.
    if descriptor.get("strict") is not True:
        return False

    schema = descriptor.get("schema")
    if not isinstance(schema, dict) or schema.get("type") != "object":
        return False

    properties = schema.get("properties")
    if not isinstance(properties, dict) or not properties:
        return False

    if schema.get("additionalProperties") is not False:
        logger.warning(
            "Consider setting additionalProperties: false for strict schema "
            "validation (schema %r)",
            name,
        )

    return True


def build_payload(request: ChatRequest, default_model: str) -> Dict[str, Any]:
    """Validate a request and assemble the wire payload.

    Args:
        request: The caller's chat request.
        default_model: Model used when the request does not name one.

    Returns:
        The JSON body for POST /chat/completions.

    Raises:
        ValidationError: If the messages or response_format are invalid.
    """
    validate_messages(request.messages)

    if request.response_format is not None and not validate_response_format(
        request.response_format
    ):
        raise ValidationError(
            "invalid response_format structure",
            ["response_format must follow json_schema pattern with strict: true"],
        )

    payload: Dict[str, Any] = {
        "messages": [m.model_dump() for m in request.messages],
        "model": request.model or default_model,
    }

    if request.response_format is not None:
        payload["response_format"] = request.response_format

    for name in _TUNING_FIELDS:
        value = getattr(request, name)
        if value is not None:
            payload[name] = value

    return payload


def json_schema_format(
    name: str, schema: Dict[str, Any], strict: bool = True
) -> Dict[str, Any]:
    """Wrap a JSON schema in a response_format descriptor."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "strict": strict, "schema": schema},
    }


def apply_preset(request: ChatRequest, name: str) -> ChatRequest:
    """Return a copy of request with unset model/temperature/max_tokens taken from a preset.

    Raises:
        KeyError: If the preset name is unknown.
    """
    preset = PRESETS[name]
    updates: Dict[str, Any] = {}
    if request.model is None:
        updates["model"] = preset.default_model
    if request.temperature is None:
        updates["temperature"] = preset.temperature
    if request.max_tokens is None:
        updates["max_tokens"] = preset.max_tokens
    return request.model_copy(update=updates)
