import os
from contextlib import asynccontextmanager

import structlog
import structlog.contextvars
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from account_deletion.account.endpoint import router as account_router
from account_deletion.config import AppConfig
from account_deletion.logging_config import setup_structlog
from account_deletion.utils.aws_clients import create_aws_clients
from account_deletion.utils.cors import FALLBACK_CORS_HEADERS
from account_deletion.utils.dependencies import (
    build_cors_headers,
    build_deletion_service,
)
from account_deletion.utils.exceptions import ServiceError
from account_deletion.utils.middleware import structured_logging_middleware

JSON_LOGS_ENABLED = os.getenv("JSON_LOGS", "false").lower() in ("true", "1", "t")
setup_structlog(
    json_logs=JSON_LOGS_ENABLED,
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    service_name=os.getenv("SERVICE_NAME", "account-deletion"),
    environment=os.getenv("ENVIRONMENT", "development"),
    serve_http=True,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Load configuration and create the AWS clients on startup.
    """
    try:
        app.state.settings = AppConfig()
    except ValidationError as e:
        logger.fatal("Failed to load configuration from environment.", error=str(e))
        raise

    settings = app.state.settings
    logger.info(
        "Application starting up...",
        service=settings.service_name,
        region=settings.aws_region,
    )

    clients = create_aws_clients(settings.aws_region)
    app.state.deletion_service = build_deletion_service(settings, clients)
    app.state.cors_headers = build_cors_headers(settings, clients)
    logger.info("AWS clients initialized.")

    yield

    logger.info("Application shutting down...")


app = FastAPI(
    version="1.0.0",
    title="Account Deletion API",
    description="Deletes a user account from Cognito, DynamoDB and its conversations.",
    lifespan=lifespan,
)


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    logger.warning(
        "Service error occurred, returning HTTP response",
        detail=exc.detail,
        status_code=exc.status_code,
    )
    headers = getattr(request.state, "cors_headers", FALLBACK_CORS_HEADERS)
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=headers,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "An unhandled exception occurred",
        error=str(exc),
    )
    context_vars = structlog.contextvars.get_contextvars()
    correlation_id = context_vars.get("correlation_id", "not-available")
    return JSONResponse(
        status_code=500,
        content={
            "message": "An internal server error occurred.",
            "error_id": correlation_id,
        },
    )


app.middleware("http")(structured_logging_middleware)

app.include_router(account_router, prefix="/account", tags=["account"])


@app.get("/health", tags=["Health Check"], include_in_schema=False)
def health_check():
    return {"status": "ok"}
