"""API test infrastructure: async httpx client with faked external services."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.deps import get_country_lookup, get_irradiance_source


# ---------------------------------------------------------------------------
# FastAPI app with overridden dependencies
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def irradiance_source(source_factory):
    return source_factory()


@pytest_asyncio.fixture
async def app(irradiance_source):
    from app.main import create_app

    application = create_app()

    async def _lookup(lat: float, lon: float) -> str | None:
        return "Venezuela"

    application.dependency_overrides[get_irradiance_source] = lambda: irradiance_source
    application.dependency_overrides[get_country_lookup] = lambda: _lookup

    # Reset rate limiters between tests
    from app.core.rate_limit import optimize_limiter, report_limiter
    optimize_limiter.reset()
    report_limiter.reset()

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
