"""
Pytest Configuration and Shared Fixtures

Points the app at a throwaway database and throwaway image directories
before it is imported, and wipes both between tests.
"""

import os
import shutil
import tempfile
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Test environment setup
TEST_ROOT = tempfile.mkdtemp(prefix="gallery-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(TEST_ROOT, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(TEST_ROOT, "savedImages")
os.environ["STAGING_DIR"] = os.path.join(TEST_ROOT, ".staging")
os.environ["LOG_FILE"] = ""

import config  # noqa: E402
from database import SessionLocal  # noqa: E402
from main import app as gallery_app  # noqa: E402
from models import Image  # noqa: E402


def _empty_dir(path):
    if not os.path.isdir(path):
        return
    for name in os.listdir(path):
        os.remove(os.path.join(path, name))


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(TEST_ROOT, ignore_errors=True)


# =============================================================================
# State Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clean_state():
    """Start every test with no records and no stored files."""
    db = SessionLocal()
    try:
        db.query(Image).delete()
        db.commit()
    finally:
        db.close()
    _empty_dir(config.UPLOAD_DIR)
    _empty_dir(config.STAGING_DIR)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def upload_dir() -> str:
    return config.UPLOAD_DIR


@pytest.fixture
def staging_dir() -> str:
    return config.STAGING_DIR


# =============================================================================
# FastAPI App Fixtures
# =============================================================================

@pytest.fixture
def app():
    return gallery_app


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
def jpeg_bytes() -> bytes:
    return b"\xff\xd8\xff\xe0" + b"\x00" * 1020
