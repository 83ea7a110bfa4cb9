"""FastAPI diagnostics service for the OpenRouter chat client.

GET /v1/verify runs the verification checks against the configured provider
and answers 200 when every check passes, 500 otherwise. The client factory
lives on ``app.state`` so tests and deployments can swap it; there is no
module-level client.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from openrouter_client.client import ChatClient
from openrouter_client.telemetry import setup_logging
from openrouter_client.verify import run_verification


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Configure logging and the default client factory on startup."""
    setup_logging(os.getenv("OPENROUTER_LOG_FILE"))
    if not hasattr(application.state, "client_factory"):
        application.state.client_factory = ChatClient.from_env
    yield


app = FastAPI(title="OpenRouter Client Diagnostics", version="0.1.0", lifespan=lifespan)


@app.get("/healthz")
async def healthz() -> JSONResponse:
    """Liveness check; does not touch the provider."""
    return JSONResponse(status_code=200, content={"status": "ok"})


@app.get("/v1/verify", response_model=None)
async def verify(request: Request) -> JSONResponse:
    """Run the end-to-end verification checks."""
    factory = getattr(request.app.state, "client_factory", ChatClient.from_env)
    report = await run_verification(factory)
    return JSONResponse(
        status_code=200 if report.success else 500,
        content=report.model_dump(),
    )
