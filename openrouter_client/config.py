"""Configuration for the OpenRouter chat client.

validate_config() is the single constructor for ClientConfig: it normalizes
the caller's settings, applies defaults and rejects invalid values before a
client can be built. Configuration can also be read from the environment or
from a JSON/YAML file; in both cases the API key is resolved from an
environment variable and never written to disk.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

import yaml

from openrouter_client.errors import is_number

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "anthropic/claude-3.5-sonnet"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3


class ConfigError(ValueError):
    """Raised when client configuration is missing or invalid."""


@dataclass(frozen=True)
class ClientConfig:
    """Validated, immutable client configuration.

    Build instances with validate_config(); the API key is hidden from repr.
    """

    api_key: str = field(repr=False)
    base_url: str = DEFAULT_BASE_URL
    default_model: str = DEFAULT_MODEL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    app_url: Optional[str] = None
    app_title: Optional[str] = None
    honor_retry_after: bool = False
    total_timeout: Optional[float] = None


@dataclass(frozen=True)
class Preset:
    """Named tuning defaults for common workloads."""

    default_model: str
    temperature: float
    max_tokens: int


PRESETS: Dict[str, Preset] = {
    # Lower cost, quick answers (simple categorization)
    "fast": Preset(default_model="openai/gpt-3.5-turbo", temperature=0.7, max_tokens=500),
    "accurate": Preset(default_model=DEFAULT_MODEL, temperature=0.3, max_tokens=1500),
    "balanced": Preset(default_model=DEFAULT_MODEL, temperature=0.5, max_tokens=1000),
}


def validate_config(
    api_key: Optional[str],
    base_url: Optional[str] = None,
    default_model: Optional[str] = None,
    timeout: Optional[float] = None,
    max_retries: Optional[int] = None,
    app_url: Optional[str] = None,
    app_title: Optional[str] = None,
    honor_retry_after: bool = False,
    total_timeout: Optional[float] = None,
) -> ClientConfig:
    """Validate client settings and apply defaults.

    Args:
        api_key: Provider credential. Required, surrounding whitespace is stripped.
        base_url: Provider endpoint; defaults to the OpenRouter API.
        default_model: Model used when a request does not name one.
        timeout: Per-attempt timeout in seconds (> 0).
        max_retries: Maximum number of attempts per call (non-negative integer).
        app_url: Optional value for the HTTP-Referer attribution header.
        app_title: Optional value for the X-Title attribution header.
        honor_retry_after: Let a provider retry-after hint lengthen backoff.
        total_timeout: Optional wall-clock cap in seconds across all attempts.

    Returns:
        A frozen ClientConfig.

    Raises:
        ConfigError: If any value is invalid.
    """
    if not isinstance(api_key, str) or not api_key.strip():
        raise ConfigError(
            "OpenRouter API key is required. "
            "Please provide a valid API key in the configuration."
        )

    if base_url is not None and not _is_valid_url(base_url):
        raise ConfigError(
            "Invalid base URL: {}. Base URL must be a valid URL format.".format(base_url)
        )

    if timeout is not None and (not is_number(timeout) or timeout <= 0):
        raise ConfigError(
            "Invalid timeout: {}. Timeout must be a positive number of seconds.".format(
                timeout
            )
        )

    if max_retries is not None and (
        not isinstance(max_retries, int) or isinstance(max_retries, bool) or max_retries < 0
    ):
        raise ConfigError(
            "Invalid max_retries: {}. max_retries must be a non-negative integer.".format(
                max_retries
            )
        )

    if total_timeout is not None and (not is_number(total_timeout) or total_timeout <= 0):
        raise ConfigError(
            "Invalid total_timeout: {}. total_timeout must be a positive number "
            "of seconds.".format(total_timeout)
        )

    return ClientConfig(
        api_key=api_key.strip(),
        base_url=(base_url or DEFAULT_BASE_URL).rstrip("/"),
        default_model=default_model or DEFAULT_MODEL,
        timeout=float(timeout) if timeout is not None else DEFAULT_TIMEOUT,
        max_retries=max_retries if max_retries is not None else DEFAULT_MAX_RETRIES,
        app_url=app_url,
        app_title=app_title,
        honor_retry_after=bool(honor_retry_after),
        total_timeout=float(total_timeout) if total_timeout is not None else None,
    )


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """Build a ClientConfig from OPENROUTER_* environment variables.

    Raises:
        ConfigError: If OPENROUTER_API_KEY is unset or a value is invalid.
    """
    env = os.environ if environ is None else environ

    api_key = env.get("OPENROUTER_API_KEY")
    if not api_key:
        raise ConfigError(
            "OPENROUTER_API_KEY environment variable is not set. "
            "Get your API key from: https://openrouter.ai/keys"
        )

    return validate_config(
        api_key,
        base_url=env.get("OPENROUTER_BASE_URL") or None,
        default_model=env.get("OPENROUTER_DEFAULT_MODEL") or None,
        timeout=_parse_env_number(env, "OPENROUTER_TIMEOUT", float),
        max_retries=_parse_env_number(env, "OPENROUTER_MAX_RETRIES", int),
        app_url=env.get("OPENROUTER_APP_URL") or None,
        app_title=env.get("OPENROUTER_APP_TITLE") or None,
    )


def load_config(path: Union[str, Path]) -> ClientConfig:
    """Load client configuration from a JSON or YAML file.

    The file names the environment variable holding the key (``api_key_env``,
    default OPENROUTER_API_KEY) rather than the key itself.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If the file contents or resolved values are invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        if path.suffix in (".yaml", ".yml"):
            raw = yaml.safe_load(f) or {}
        else:
            raw = json.load(f)

    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a mapping: {}".format(path))

    api_key_env = raw.get("api_key_env", "OPENROUTER_API_KEY")
    return validate_config(
        os.getenv(api_key_env),
        base_url=raw.get("base_url"),
        default_model=raw.get("default_model"),
        timeout=raw.get("timeout"),
        max_retries=raw.get("max_retries"),
        app_url=raw.get("app_url"),
        app_title=raw.get("app_title"),
        honor_retry_after=raw.get("honor_retry_after", False),
        total_timeout=raw.get("total_timeout"),
    )


def _is_valid_url(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _parse_env_number(env: Mapping[str, str], name: str, cast: Any) -> Any:
    value = env.get(name)
    if not value:
        return None
    try:
        return cast(value)
    except ValueError:
        raise ConfigError("Invalid {}: {!r}".format(name, value)) from None
