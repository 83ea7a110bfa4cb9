"""Tests for the verification checks and the diagnostics endpoint."""

import pytest
from httpx import ASGITransport, AsyncClient

from openrouter_client.app import app
from openrouter_client.client import ChatClient
from openrouter_client.config import ConfigError, validate_config
from openrouter_client.verify import run_verification

from tests.conftest import TEST_API_KEY, TransportSpy, make_success_body, no_sleep


def _structured_body() -> dict:
    body = make_success_body(model="openai/gpt-4o-mini")
    body["choices"][0]["message"]["content"] = '{"category": "Food", "confidence": 0.9}'
    return body


def _factory(spy: TransportSpy):
    def build() -> ChatClient:
        return ChatClient(
            validate_config(TEST_API_KEY, max_retries=1),
            http_transport=spy.transport,
            sleep=no_sleep,
        )

    return build


def _failing_factory() -> ChatClient:
    raise ConfigError("OPENROUTER_API_KEY environment variable is not set.")


@pytest.fixture(autouse=True)
def _reset_app_state():
    """Remove any client factory a test installed on the app."""
    yield
    if hasattr(app.state, "client_factory"):
        del app.state.client_factory


class TestRunVerification:
    """Tests for run_verification()."""

    @pytest.mark.asyncio
    async def test_all_checks_pass(self) -> None:
        spy = TransportSpy([(200, make_success_body()), (200, _structured_body())])
        report = await run_verification(_factory(spy))

        assert report.success is True
        assert report.passed == 4
        assert report.failed == 0
        assert [r.test for r in report.results] == [
            "Client Initialization",
            "Response Format Validation",
            "Basic Chat Completion",
            "Structured Output (JSON Schema)",
        ]
        assert report.results[3].details["result"] == {"category": "Food", "confidence": 0.9}
        assert spy.payload(1)["response_format"]["type"] == "json_schema"

    @pytest.mark.asyncio
    async def test_initialization_failure_stops(self) -> None:
        report = await run_verification(_failing_factory)
        assert report.success is False
        assert len(report.results) == 1
        assert "OPENROUTER_API_KEY" in report.results[0].message

    @pytest.mark.asyncio
    async def test_provider_error_reported(self) -> None:
        spy = TransportSpy([(401, {"error": "bad key"})])
        report = await run_verification(_factory(spy))
        assert report.success is False
        assert report.failed == 2
        assert report.results[2].message == "AUTHENTICATION_ERROR: bad key"
        assert report.results[2].details["retryable"] is False

    @pytest.mark.asyncio
    async def test_non_json_structured_content(self) -> None:
        spy = TransportSpy([(200, make_success_body())])
        report = await run_verification(_factory(spy))
        assert report.results[3].status == "fail"
        assert "not valid JSON" in report.results[3].message


@pytest.mark.asyncio
async def test_healthz() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_verify_endpoint_success() -> None:
    spy = TransportSpy([(200, make_success_body()), (200, _structured_body())])
    app.state.client_factory = _factory(spy)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/v1/verify")

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["passed"] == 4


@pytest.mark.asyncio
async def test_verify_endpoint_failure() -> None:
    app.state.client_factory = _failing_factory

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/v1/verify")

    assert resp.status_code == 500
    assert resp.json()["success"] is False
