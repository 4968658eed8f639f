from fastapi import Request

from account_deletion.account.repository import (
    ConversationRepository,
    IdentityRepository,
    UserRepository,
)
from account_deletion.account.service import AccountDeletionService
from account_deletion.config import AppConfig
from account_deletion.utils.aws_clients import AwsClients
from account_deletion.utils.cors import CorsHeaderSource, LambdaCorsHeaders


def build_deletion_service(
    settings: AppConfig, clients: AwsClients
) -> AccountDeletionService:
    """Wire the deletion service to its repositories."""
    return AccountDeletionService(
        identities=IdentityRepository(clients.cognito, settings.user_pool_id),
        users=UserRepository(
            clients.dynamodb, settings.users_table, settings.users_key_attribute
        ),
        conversations=ConversationRepository(
            clients.dynamodb,
            table_name=settings.conversations_table,
            index_name=settings.associated_account_index,
            owner_attribute=settings.associated_account_attribute,
            partition_key=settings.conversation_partition_key,
            sort_key=settings.conversation_sort_key or None,
        ),
    )


def build_cors_headers(settings: AppConfig, clients: AwsClients) -> LambdaCorsHeaders:
    return LambdaCorsHeaders(clients.lambda_, settings.cors_function_name)


def get_deletion_service(request: Request) -> AccountDeletionService:
    """Dependency to get the deletion service from the application state."""
    return request.app.state.deletion_service


def get_cors_headers(request: Request) -> CorsHeaderSource:
    """Dependency to get the CORS header source from the application state."""
    return request.app.state.cors_headers
