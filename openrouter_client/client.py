"""The chat client: validate, send with retries, parse.

A ChatClient is constructed explicitly by its owner and holds nothing but
read-only configuration, so one instance can be shared by concurrent callers.

Call flow:
1. Build and validate the payload (no network on failure)
2. Send through the transport, retrying transient errors with backoff
3. Validate the success body into a ChatResponse
"""

import asyncio
import uuid
from typing import Any, Awaitable, Callable, Optional

import httpx

from openrouter_client.config import ClientConfig, config_from_env
from openrouter_client.errors import ClientError, ValidationError
from openrouter_client.models import ChatRequest, ChatResponse, ChatResult
from openrouter_client.request_builder import build_payload, validate_response_format
from openrouter_client.response_parser import parse_response
from openrouter_client.retry import execute_with_retry
from openrouter_client.telemetry import log_request
from openrouter_client.transport import Transport

CHAT_COMPLETIONS_PATH = "/chat/completions"


class ChatClient:
    """Resilient client for OpenAI-compatible chat completions."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not isinstance(config, ClientConfig):
            raise TypeError(
                "ChatClient requires a ClientConfig built by validate_config(), "
                "got {}".format(type(config).__name__)
            )
        self.config = config
        self._sleep = sleep
        self._transport = Transport(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            app_url=config.app_url,
            app_title=config.app_title,
            http_transport=http_transport,
        )

    @classmethod
    def from_env(cls, **kwargs: Any) -> "ChatClient":
        """Build a client from OPENROUTER_* environment variables."""
        return cls(config_from_env(), **kwargs)

    def validate_response_format(self, response_format: Any) -> bool:
        """Pre-flight a response_format descriptor without any network call."""
        return validate_response_format(response_format)

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Send a chat completion request and return the validated response.

        Raises:
            ClientError: The classified failure (ValidationError before any
                network call; transport and parse errors after retries).
        """
        result = await self.try_chat(request)
        if result.error is not None:
            raise result.error
        return result.response

    async def try_chat(self, request: ChatRequest) -> ChatResult:
        """Like chat(), but return the outcome (response or error) as a value."""
        request_id = "or-{}".format(uuid.uuid4().hex[:12])
        model = request.model or self.config.default_model

        try:
            payload = build_payload(request, self.config.default_model)
        except ValidationError as exc:
            log_request(
                request_id=request_id,
                model=model,
                outcome="validation_error",
                attempts=0,
                error=exc.to_dict(),
            )
            return ChatResult(error=exc, attempts=0)

        attempts = 0

        async def attempt() -> ChatResponse:
            nonlocal attempts
            attempts += 1
            raw = await self._transport.post(CHAT_COMPLETIONS_PATH, payload)
            return parse_response(raw)

        try:
            response = await execute_with_retry(
                attempt,
                self.config.max_retries,
                sleep=self._sleep,
                honor_retry_after=self.config.honor_retry_after,
                total_timeout=self.config.total_timeout,
            )
        except ClientError as exc:
            log_request(
                request_id=request_id,
                model=model,
                outcome="error",
                attempts=attempts,
                error=exc.to_dict(),
            )
            return ChatResult(error=exc, attempts=attempts)

        log_request(
            request_id=request_id,
            model=model,
            outcome="success",
            attempts=attempts,
            usage=response.usage.model_dump(),
        )
        return ChatResult(response=response, attempts=attempts)
