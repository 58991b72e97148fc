"""Shared test fixtures."""

import os

os.environ.setdefault("JWT_SECRET", "unit-test-secret")
os.environ.setdefault("PLATFORM_OPERATOR_ADDRESS", "0x" + "00" * 19 + "01")
os.environ.setdefault("ESCROW_ADDRESS", "0x" + "00" * 19 + "02")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from src.main import app  # noqa: E402


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
