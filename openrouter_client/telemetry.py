"""Logging for the OpenRouter chat client.

Emits one structured JSON record per chat call and keeps credentials and
message content out of every log line.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("openrouter_client")

_SENSITIVE_KEYS = ("api_key", "apiKey", "authorization", "Authorization")

# Shared by every handler the client installs; records are JSON after the level.
_FORMATTER = logging.Formatter(
    "%(asctime)s %(name)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


def _attach(handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(_FORMATTER)
    logger.addHandler(handler)


def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO) -> None:
    """Route client records to stderr and, optionally, an append-only file.

    Calling it again only adjusts the level; handlers are installed once.
    """
    logger.setLevel(level)
    if logger.handlers:
        return

    _attach(logging.StreamHandler(), level)
    if log_file:
        log_path = Path(log_file)
        os.makedirs(log_path.parent, exist_ok=True)
        _attach(logging.FileHandler(log_path, mode="a"), level)


def sanitize_for_logging(data: Any) -> Any:
    """Return a copy of a payload that is safe to log.

    Credential fields are dropped and message content is replaced by its
    length. Non-dict values are returned unchanged.
    """
    if not isinstance(data, dict):
        return data

    sanitized = {k: v for k, v in data.items() if k not in _SENSITIVE_KEYS}

    messages = sanitized.get("messages")
    if isinstance(messages, list):
        sanitized["messages"] = [
            {
                "role": m.get("role") if isinstance(m, dict) else None,
                "content_length": len(m.get("content") or "") if isinstance(m, dict) else 0,
            }
            for m in messages
        ]

    return sanitized


def log_request(
    *,
    request_id: str,
    model: str,
    outcome: str,
    attempts: int,
    usage: Optional[Dict[str, Any]] = None,
    error: Optional[Dict[str, Any]] = None,
) -> None:
    """Log a single chat call outcome as a JSON line.

    Args:
        request_id: Client-assigned request ID.
        model: The model the payload targeted.
        outcome: Short outcome label ("success", "validation_error", "error").
        attempts: Number of transport attempts made.
        usage: Token usage dict if available.
        error: Serialized ClientError if the call failed.
    """
    record: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "model": model,
        "outcome": outcome,
        "attempts": attempts,
    }

    if usage:
        record["usage"] = usage

    if error:
        record["error"] = error
        logger.error(json.dumps(record))
        return

    logger.info(json.dumps(record))
