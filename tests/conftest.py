# tests/conftest.py

import os

os.environ.setdefault("COGNITO_USER_POOL_ID", "us-east-2_TestPool")
os.environ.setdefault("AWS_REGION", "us-east-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from unittest.mock import AsyncMock, MagicMock

import boto3
import pytest

from account_deletion.account.service import AccountDeletionService
from account_deletion.utils.cors import FALLBACK_CORS_HEADERS

REGION = "us-east-2"
NEGOTIATED_HEADERS = {
    "Access-Control-Allow-Origin": "https://app.example.com",
    "Access-Control-Allow-Methods": "OPTIONS, POST",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Credentials": "true",
}


@pytest.fixture
def cognito_client():
    return boto3.client("cognito-idp", region_name=REGION)


@pytest.fixture
def dynamodb_client():
    return boto3.client("dynamodb", region_name=REGION)


@pytest.fixture
def lambda_client():
    return boto3.client("lambda", region_name=REGION)


@pytest.fixture
def mock_identities() -> AsyncMock:
    """Provides a mock for the IdentityRepository."""
    return AsyncMock()


@pytest.fixture
def mock_users() -> AsyncMock:
    """Provides a mock for the UserRepository."""
    return AsyncMock()


@pytest.fixture
def mock_conversations() -> AsyncMock:
    """Provides a mock for the ConversationRepository with no records."""
    mock = AsyncMock()
    mock.find_by_account.return_value = []
    return mock


@pytest.fixture
def deletion_service(
    mock_identities: AsyncMock,
    mock_users: AsyncMock,
    mock_conversations: AsyncMock,
) -> AccountDeletionService:
    return AccountDeletionService(
        identities=mock_identities,
        users=mock_users,
        conversations=mock_conversations,
    )


@pytest.fixture
def mock_cors() -> MagicMock:
    """Provides a CORS header source answering with negotiated headers."""
    mock = MagicMock()
    mock.get_headers.return_value = dict(NEGOTIATED_HEADERS)
    return mock


@pytest.fixture
def negotiated_headers() -> dict[str, str]:
    return dict(NEGOTIATED_HEADERS)


@pytest.fixture
def fallback_headers() -> dict[str, str]:
    return dict(FALLBACK_CORS_HEADERS)
