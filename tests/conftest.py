"""Test fixtures for madurez-digital.

The narrative service is simulated with ``httpx.MockTransport`` so the real
HttpNarrativeClient runs in every test that needs one.
"""

import json
from collections.abc import AsyncGenerator, Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from madurez_digital.adapters.narrative_client import HttpNarrativeClient
from madurez_digital.api.routes.survey import get_narrative_client
from madurez_digital.core.taxonomy import DEFAULT_TAXONOMY
from madurez_digital.main import create_app
from madurez_digital.settings import Settings

NARRATIVE_BASE_URL = "http://narrative.test"
SAMPLE_REPORT = (
    "# Resumen\n\nSu organización muestra una **madurez intermedia**.\n\n- Fortalecer datos"
)

Handler = Callable[[httpx.Request], httpx.Response]


class NarrativeServiceStub:
    """Records requests sent to the narrative service and replies via ``handler``."""

    def __init__(self, handler: Handler | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = handler or (
            lambda request: httpx.Response(200, json={"report": SAMPLE_REPORT})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


def all_answers(value: int | float) -> dict[str, int | float]:
    """Answer every question of the default taxonomy with ``value``."""
    return {qid: value for qid in DEFAULT_TAXONOMY.question_ids}


@pytest.fixture()
def settings() -> Settings:
    return Settings(report_service_url=NARRATIVE_BASE_URL)


@pytest.fixture()
def sample_report() -> str:
    return SAMPLE_REPORT


@pytest.fixture()
def answer_all() -> Callable[[int | float], dict[str, int | float]]:
    """Factory answering every question of the default taxonomy with one value."""
    return all_answers


@pytest.fixture()
def narrative_stub() -> NarrativeServiceStub:
    return NarrativeServiceStub()


@pytest_asyncio.fixture()
async def narrative_client(
    narrative_stub: NarrativeServiceStub,
    settings: Settings,
) -> AsyncGenerator[HttpNarrativeClient, None]:
    """HttpNarrativeClient wired to the stub transport."""
    async with httpx.AsyncClient(
        base_url=NARRATIVE_BASE_URL,
        transport=httpx.MockTransport(narrative_stub),
    ) as http_client:
        yield HttpNarrativeClient(
            http_client=http_client,
            endpoint_path=settings.report_endpoint_path,
        )


@pytest.fixture()
def app(settings: Settings, narrative_client: HttpNarrativeClient) -> FastAPI:
    application = create_app(settings)
    application.dependency_overrides[get_narrative_client] = lambda: narrative_client
    return application


@pytest_asyncio.fixture()
async def api_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async test client against a fresh application."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as client:
        yield client

    app.dependency_overrides.clear()
