"""Repository layer for the AWS systems an account lives in."""

import asyncio
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from structlog import get_logger

from account_deletion.account.models import DependentRecord
from account_deletion.utils.exceptions import NotFoundError, UpstreamError

logger = get_logger(__name__)

USER_NOT_FOUND_CODE = "UserNotFoundException"


def error_message(error: Exception) -> str:
    """Return the service-provided message of a botocore error."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Message") or str(error)
    return str(error)


class IdentityRepository:
    """Handles account operations against the Cognito user pool."""

    def __init__(self, client: Any, user_pool_id: str):
        self._client = client
        self._user_pool_id = user_pool_id

    async def delete_user(self, username: str) -> None:
        """
        Deletes the user pool account for ``username``.

        Raises:
            NotFoundError: If the pool has no such user.
            UpstreamError: For any other Cognito failure.
        """
        try:
            await asyncio.to_thread(
                self._client.admin_delete_user,
                UserPoolId=self._user_pool_id,
                Username=username,
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == USER_NOT_FOUND_CODE:
                raise NotFoundError(error_message(e)) from e
            logger.error(
                "Cognito error during account deletion",
                username=username,
                error=str(e),
            )
            raise UpstreamError(error_message(e)) from e
        except BotoCoreError as e:
            logger.error(
                "Cognito call failed during account deletion",
                username=username,
                error=str(e),
            )
            raise UpstreamError(error_message(e)) from e


class UserRepository:
    """Handles user record operations on the users table."""

    def __init__(self, client: Any, table_name: str, key_attribute: str):
        self._client = client
        self._table_name = table_name
        self._key_attribute = key_attribute

    async def delete_user(self, email: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.delete_item,
                TableName=self._table_name,
                Key={self._key_attribute: {"S": email}},
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "DynamoDB error deleting user record",
                table=self._table_name,
                email=email,
                error=str(e),
            )
            raise UpstreamError(error_message(e)) from e


class ConversationRepository:
    """Handles conversation records owned by an account."""

    def __init__(
        self,
        client: Any,
        table_name: str,
        index_name: str,
        owner_attribute: str,
        partition_key: str,
        sort_key: str | None = None,
    ):
        self._client = client
        self._table_name = table_name
        self._index_name = index_name
        self._owner_attribute = owner_attribute
        self._partition_key = partition_key
        self._sort_key = sort_key

    async def find_by_account(self, email: str) -> list[DependentRecord]:
        """
        Queries the owner index for every conversation of ``email``.

        Follows ``LastEvaluatedKey`` until the index is exhausted.

        Raises:
            UpstreamError: If a query fails or an item lacks a key attribute.
        """
        params: dict[str, Any] = {
            "TableName": self._table_name,
            "IndexName": self._index_name,
            "KeyConditionExpression": f"{self._owner_attribute} = :email",
            "ExpressionAttributeValues": {":email": {"S": email}},
        }
        records: list[DependentRecord] = []
        while True:
            try:
                page = await asyncio.to_thread(self._client.query, **params)
            except (ClientError, BotoCoreError) as e:
                logger.error(
                    "DynamoDB error querying conversations",
                    table=self._table_name,
                    index=self._index_name,
                    email=email,
                    error=str(e),
                )
                raise UpstreamError(error_message(e)) from e

            records.extend(self._to_record(item) for item in page.get("Items", []))

            last_key = page.get("LastEvaluatedKey")
            if not last_key:
                return records
            params["ExclusiveStartKey"] = last_key

    async def delete(self, record: DependentRecord) -> None:
        key = {self._partition_key: record.primary_key}
        if self._sort_key:
            key[self._sort_key] = record.secondary_key
        try:
            await asyncio.to_thread(
                self._client.delete_item, TableName=self._table_name, Key=key
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                "DynamoDB error deleting conversation",
                table=self._table_name,
                key=key,
                error=str(e),
            )
            raise UpstreamError(error_message(e)) from e

    def _to_record(self, item: dict[str, Any]) -> DependentRecord:
        missing = [
            name
            for name in (self._partition_key, self._sort_key)
            if name and name not in item
        ]
        if missing:
            raise UpstreamError(
                f"Conversation item is missing key attribute(s): {', '.join(missing)}"
            )
        return DependentRecord(
            primary_key=item[self._partition_key],
            secondary_key=item[self._sort_key] if self._sort_key else None,
        )
