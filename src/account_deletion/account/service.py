"""Service layer for account deletion."""

import asyncio

from structlog import get_logger

from account_deletion.account.models import (
    SUCCESS_MESSAGE,
    DeletionRequest,
    DeletionResult,
)
from account_deletion.account.repository import (
    ConversationRepository,
    IdentityRepository,
    UserRepository,
)
from account_deletion.utils.exceptions import ServiceError

logger = get_logger(__name__)


class AccountDeletionService:
    """Deletes an account from Cognito, the users table and its conversations."""

    def __init__(
        self,
        identities: IdentityRepository,
        users: UserRepository,
        conversations: ConversationRepository,
    ):
        self.identities = identities
        self.users = users
        self.conversations = conversations

    async def delete_account(self, request: DeletionRequest) -> DeletionResult:
        """
        Delete the account identified by ``request.email``.

        Steps run in order and the first failure aborts the rest. Conversation
        deletes run concurrently; one failing fails the whole request, and the
        ones that already succeeded stay deleted.

        Raises:
            NotFoundError: If Cognito has no user for the email.
            ServiceError: For every other failure.
        """
        email = request.email
        try:
            await self.identities.delete_user(email)
            logger.info("Deleted identity", email=email)

            await self.users.delete_user(email)
            logger.info("Deleted user record", email=email)

            records = await self.conversations.find_by_account(email)
            await asyncio.gather(
                *(self.conversations.delete(record) for record in records)
            )
            logger.info(
                "Account deletion completed",
                email=email,
                deleted_conversations=len(records),
            )
            return DeletionResult(status_code=200, message=SUCCESS_MESSAGE)

        except ServiceError:
            raise
        except Exception as e:
            logger.error(
                "Unexpected error during account deletion",
                email=email,
                error=str(e),
                exc_info=True,
            )
            raise ServiceError(str(e)) from e
