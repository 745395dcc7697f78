import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from typing import AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import httpx
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from main import app
from models import Base
from database import get_db
from aws_clients import get_s3_client, get_transcribe_client, get_rekognition_client
from config import Settings, get_settings

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()

@pytest.fixture(scope="function")
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        AWS_REGION="ap-northeast-2",
        AWS_ACCESS_KEY_ID="test-access-key",
        AWS_SECRET_ACCESS_KEY="test-secret-key",
        RECORDING_BUCKET="test-recordings",
        PROFILE_BUCKET="test-profiles",
        ANALYSIS_BUCKET="test-analysis",
        FILE_LOGGING_ENABLED=False
    )

@pytest.fixture(scope="function")
def mock_s3():
    return MagicMock(name="s3")

@pytest.fixture(scope="function")
def mock_transcribe():
    return MagicMock(name="transcribe")

@pytest.fixture(scope="function")
def mock_rekognition():
    return MagicMock(name="rekognition")

@pytest_asyncio.fixture(scope="function")
async def async_client(
    db_session: AsyncSession,
    test_settings: Settings,
    mock_s3: MagicMock,
    mock_transcribe: MagicMock,
    mock_rekognition: MagicMock
) -> AsyncGenerator[AsyncClient, None]:
    def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_s3_client] = lambda: mock_s3
    app.dependency_overrides[get_transcribe_client] = lambda: mock_transcribe
    app.dependency_overrides[get_rekognition_client] = lambda: mock_rekognition

    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://testias") as client:
        yield client

    app.dependency_overrides.clear()
