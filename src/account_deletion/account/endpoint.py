"""Account deletion API endpoints."""

import asyncio
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from account_deletion.account.models import DeletionRequest
from account_deletion.account.service import AccountDeletionService
from account_deletion.utils.cors import CorsHeaderSource
from account_deletion.utils.dependencies import (
    get_cors_headers,
    get_deletion_service,
)

router = APIRouter()


async def _negotiate_cors(
    request: Request, cors: CorsHeaderSource, body: bytes = b""
) -> dict[str, str]:
    event: dict[str, Any] = {
        "httpMethod": request.method,
        "path": request.url.path,
        "headers": dict(request.headers),
        "body": body.decode("utf-8", errors="replace") or None,
    }
    headers = await asyncio.to_thread(cors.get_headers, event)
    # Read by the ServiceError handler so error responses carry them too.
    request.state.cors_headers = headers
    return headers


@router.options("/delete", include_in_schema=False)
async def delete_account_preflight(
    request: Request,
    cors: Annotated[CorsHeaderSource, Depends(get_cors_headers)],
) -> Response:
    headers = await _negotiate_cors(request, cors)
    return Response(status_code=200, headers=headers)


@router.post(
    "/delete",
    summary="Delete a user account",
    description=(
        "Delete the Cognito account, the user record and every conversation "
        "associated with the given email."
    ),
)
async def delete_account(
    request: Request,
    service: Annotated[AccountDeletionService, Depends(get_deletion_service)],
    cors: Annotated[CorsHeaderSource, Depends(get_cors_headers)],
) -> JSONResponse:
    body = await request.body()
    headers = await _negotiate_cors(request, cors, body)

    deletion_request = DeletionRequest.from_body(body)
    result = await service.delete_account(deletion_request)
    return JSONResponse(
        status_code=result.status_code,
        content={"message": result.message},
        headers=headers,
    )
