"""Request and response models for the OpenRouter chat client."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from openrouter_client.errors import ClientError


class ChatMessage(BaseModel):
    """A single message in a chat conversation."""

    model_config = ConfigDict(frozen=True)

    role: str
    content: str


class ChatRequest(BaseModel):
    """A chat completion request.

    Fields are deliberately lax: the request builder checks roles, ordering
    and content so that failures surface as ValidationError, before any
    network call.
    """

    messages: List[ChatMessage] = Field(default_factory=list)
    model: Optional[str] = None
    response_format: Optional[Dict[str, Any]] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None


class Usage(BaseModel):
    """Token usage counters reported by the provider."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = Field(..., ge=0)
    completion_tokens: int = Field(..., ge=0)
    total_tokens: int = Field(..., ge=0)


class Choice(BaseModel):
    """One completion alternative."""

    model_config = ConfigDict(frozen=True)

    index: int
    message: ChatMessage
    finish_reason: Optional[str] = None


class ChatResponse(BaseModel):
    """Validated provider response. Built only by parse_response()."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    model: str
    created_at: int = Field(..., alias="created")
    choices: List[Choice] = Field(..., min_length=1)
    usage: Usage

    @property
    def content(self) -> str:
        """Text of the first choice (raw JSON when structured output was requested)."""
        return self.choices[0].message.content


class ChatResult(BaseModel):
    """Outcome of a chat call as a value: exactly one of response or error is set."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    response: Optional[ChatResponse] = None
    error: Optional[ClientError] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        """Return True if the call produced a response."""
        return self.error is None
