"""API Gateway event handling for account deletion."""

import asyncio
from collections.abc import Mapping
from typing import Any

from structlog import get_logger

from account_deletion.account.models import (
    DeletionRequest,
    DeletionResult,
    LambdaResponse,
)
from account_deletion.account.service import AccountDeletionService
from account_deletion.utils.cors import CorsHeaderSource
from account_deletion.utils.exceptions import ServiceError

logger = get_logger(__name__)


class AccountDeletionHandler:
    """Turns an API Gateway proxy event into a deletion and its response."""

    def __init__(self, service: AccountDeletionService, cors: CorsHeaderSource):
        self.service = service
        self.cors = cors

    async def handle(self, event: Mapping[str, Any]) -> LambdaResponse:
        headers = await asyncio.to_thread(self.cors.get_headers, event)

        if event.get("httpMethod") == "OPTIONS":
            return LambdaResponse(statusCode=200, headers=headers, body="")

        try:
            request = DeletionRequest.from_body(event.get("body"))
            result = await self.service.delete_account(request)
        except ServiceError as e:
            log_event = logger.warning if e.status_code < 500 else logger.error
            log_event(
                "Account deletion failed",
                detail=e.detail,
                status_code=e.status_code,
            )
            result = DeletionResult(status_code=e.status_code, message=e.detail)

        return LambdaResponse.from_result(result, headers)
