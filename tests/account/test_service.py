from unittest.mock import AsyncMock, call

import pytest

from account_deletion.account.models import (
    SUCCESS_MESSAGE,
    DeletionRequest,
    DependentRecord,
)
from account_deletion.account.service import AccountDeletionService
from account_deletion.utils.exceptions import (
    NotFoundError,
    ServiceError,
    UpstreamError,
)

EMAIL = "someone@example.com"


def make_records(count: int) -> list[DependentRecord]:
    return [
        DependentRecord(
            primary_key={"S": f"conv-{i}"}, secondary_key={"S": f"resp-{i}"}
        )
        for i in range(count)
    ]


@pytest.mark.asyncio
async def test_delete_account_without_conversations(
    deletion_service: AccountDeletionService,
    mock_identities: AsyncMock,
    mock_users: AsyncMock,
    mock_conversations: AsyncMock,
):
    result = await deletion_service.delete_account(DeletionRequest(email=EMAIL))

    assert result.status_code == 200
    assert result.message == SUCCESS_MESSAGE
    mock_identities.delete_user.assert_awaited_once_with(EMAIL)
    mock_users.delete_user.assert_awaited_once_with(EMAIL)
    mock_conversations.find_by_account.assert_awaited_once_with(EMAIL)
    mock_conversations.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_account_deletes_every_conversation(
    deletion_service: AccountDeletionService,
    mock_conversations: AsyncMock,
):
    records = make_records(3)
    mock_conversations.find_by_account.return_value = records

    result = await deletion_service.delete_account(DeletionRequest(email=EMAIL))

    assert result.status_code == 200
    assert mock_conversations.delete.await_count == 3
    mock_conversations.delete.assert_has_awaits(
        [call(record) for record in records], any_order=True
    )


@pytest.mark.asyncio
async def test_one_failed_conversation_delete_fails_the_request(
    deletion_service: AccountDeletionService,
    mock_conversations: AsyncMock,
):
    """
    The two other deletes are still issued and nothing is rolled back.
    """
    records = make_records(3)
    mock_conversations.find_by_account.return_value = records

    async def delete(record: DependentRecord) -> None:
        if record is records[1]:
            raise UpstreamError("Throughput exceeded")

    mock_conversations.delete.side_effect = delete

    with pytest.raises(UpstreamError, match="Throughput exceeded") as exc_info:
        await deletion_service.delete_account(DeletionRequest(email=EMAIL))

    assert exc_info.value.status_code == 500
    assert mock_conversations.delete.await_count == 3


@pytest.mark.asyncio
async def test_unknown_identity_short_circuits(
    deletion_service: AccountDeletionService,
    mock_identities: AsyncMock,
    mock_users: AsyncMock,
    mock_conversations: AsyncMock,
):
    mock_identities.delete_user.side_effect = NotFoundError("User does not exist.")

    with pytest.raises(NotFoundError) as exc_info:
        await deletion_service.delete_account(DeletionRequest(email=EMAIL))

    assert exc_info.value.status_code == 404
    mock_users.delete_user.assert_not_awaited()
    mock_conversations.find_by_account.assert_not_awaited()
    mock_conversations.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_user_record_failure_skips_conversations(
    deletion_service: AccountDeletionService,
    mock_users: AsyncMock,
    mock_conversations: AsyncMock,
):
    mock_users.delete_user.side_effect = UpstreamError("Requested resource not found")

    with pytest.raises(UpstreamError, match="Requested resource not found"):
        await deletion_service.delete_account(DeletionRequest(email=EMAIL))

    mock_conversations.find_by_account.assert_not_awaited()


@pytest.mark.asyncio
async def test_unexpected_error_is_wrapped(
    deletion_service: AccountDeletionService,
    mock_conversations: AsyncMock,
):
    mock_conversations.find_by_account.side_effect = RuntimeError("boom")

    with pytest.raises(ServiceError, match="boom") as exc_info:
        await deletion_service.delete_account(DeletionRequest(email=EMAIL))

    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, RuntimeError)
