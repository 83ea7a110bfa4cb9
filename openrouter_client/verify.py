"""End-to-end verification of a configured client against the live provider.

Runs four checks in order and reports each as pass/fail:
1. Client initialization
2. Response-format validation (no network)
3. Basic chat completion
4. Structured-output completion, decoded as JSON
"""

import json
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from openrouter_client.client import ChatClient
from openrouter_client.errors import ClientError
from openrouter_client.models import ChatMessage, ChatRequest
from openrouter_client.request_builder import json_schema_format

STRUCTURED_OUTPUT_MODEL = "openai/gpt-4o-mini"

_CATEGORY_FORMAT = json_schema_format(
    "category",
    {
        "type": "object",
        "properties": {
            "category": {"type": "string"},
            "confidence": {"type": "number"},
        },
        "required": ["category", "confidence"],
        "additionalProperties": False,
    },
)


class CheckResult(BaseModel):
    """Outcome of one verification check."""

    test: str
    status: str
    message: str
    details: Optional[Dict[str, Any]] = None


class VerificationReport(BaseModel):
    """All check outcomes plus a summary."""

    success: bool
    results: List[CheckResult] = Field(default_factory=list)
    passed: int = 0
    failed: int = 0


async def run_verification(
    client_factory: Callable[[], ChatClient],
) -> VerificationReport:
    """Run the verification checks.

    Args:
        client_factory: Builds the client; failures are reported as the first check.

    Returns:
        A VerificationReport. Later checks are skipped if initialization fails.
    """
    results: List[CheckResult] = []

    try:
        client = client_factory()
    except (ValueError, TypeError) as exc:
        results.append(
            CheckResult(test="Client Initialization", status="fail", message=str(exc))
        )
        return _report(results)

    results.append(
        CheckResult(
            test="Client Initialization",
            status="pass",
            message="Client created successfully",
        )
    )

    accepted = client.validate_response_format(_CATEGORY_FORMAT)
    results.append(
        CheckResult(
            test="Response Format Validation",
            status="pass" if accepted else "fail",
            message="Valid format accepted" if accepted else "Valid format rejected",
        )
    )

    results.append(await _check_basic_chat(client))
    results.append(await _check_structured_output(client))

    return _report(results)


async def _check_basic_chat(client: ChatClient) -> CheckResult:
    request = ChatRequest(
        messages=[
            ChatMessage(
                role="user",
                content='Say "OpenRouter integration verified!" and nothing else.',
            )
        ],
        temperature=0.3,
        max_tokens=50,
    )
    try:
        response = await client.chat(request)
    except ClientError as exc:
        return CheckResult(
            test="Basic Chat Completion",
            status="fail",
            message="{}: {}".format(exc.kind.value, exc.message),
            details=exc.to_dict(),
        )

    return CheckResult(
        test="Basic Chat Completion",
        status="pass",
        message="API call successful",
        details={
            "model": response.model,
            "content": response.content,
            "tokens": response.usage.total_tokens,
        },
    )


async def _check_structured_output(client: ChatClient) -> CheckResult:
    request = ChatRequest(
        messages=[
            ChatMessage(role="system", content="You categorize transactions."),
            ChatMessage(role="user", content='Categorize: "Coffee shop purchase - $5.00"'),
        ],
        model=STRUCTURED_OUTPUT_MODEL,
        response_format=_CATEGORY_FORMAT,
        temperature=0.2,
        max_tokens=100,
    )
    try:
        response = await client.chat(request)
    except ClientError as exc:
        return CheckResult(
            test="Structured Output (JSON Schema)",
            status="fail",
            message="{}: {}".format(exc.kind.value, exc.message),
            details=exc.to_dict(),
        )

    content = response.content
    if not content.strip():
        return CheckResult(
            test="Structured Output (JSON Schema)",
            status="fail",
            message="Model returned empty content. The model may not support "
            "structured output.",
            details={"model": response.model},
        )

    try:
        parsed = json.loads(content)
    except ValueError as exc:
        return CheckResult(
            test="Structured Output (JSON Schema)",
            status="fail",
            message="Content is not valid JSON: {}".format(exc),
            details={"model": response.model},
        )

    return CheckResult(
        test="Structured Output (JSON Schema)",
        status="pass",
        message="Structured response parsed successfully",
        details={"model": response.model, "result": parsed},
    )


def _report(results: List[CheckResult]) -> VerificationReport:
    passed = sum(1 for r in results if r.status == "pass")
    failed = len(results) - passed
    return VerificationReport(
        success=failed == 0, results=results, passed=passed, failed=failed
    )
