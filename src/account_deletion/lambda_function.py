"""
Lambda entrypoint.

Settings and AWS clients are built once per cold start; a missing
COGNITO_USER_POOL_ID fails the import and therefore the init phase.
"""

import asyncio
from typing import Any

import structlog
import structlog.contextvars

from account_deletion.config import AppConfig
from account_deletion.handler import AccountDeletionHandler
from account_deletion.logging_config import setup_structlog
from account_deletion.utils.aws_clients import create_aws_clients
from account_deletion.utils.dependencies import (
    build_cors_headers,
    build_deletion_service,
)

settings = AppConfig()
setup_structlog(
    json_logs=settings.json_logs,
    log_level=settings.log_level,
    service_name=settings.service_name,
    environment=settings.environment,
)
logger = structlog.get_logger(__name__)

_clients = create_aws_clients(settings.aws_region)
_handler = AccountDeletionHandler(
    service=build_deletion_service(settings, _clients),
    cors=build_cors_headers(settings, _clients),
)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        aws_request_id=getattr(context, "aws_request_id", None),
        request_method=event.get("httpMethod"),
        request_path=event.get("path"),
    )
    try:
        response = asyncio.run(_handler.handle(event))
        logger.info("Request completed", status_code=response.statusCode)
        return response.model_dump()
    finally:
        structlog.contextvars.clear_contextvars()
