"""Pydantic models for account deletion."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from account_deletion.utils.exceptions import BadRequestError

SUCCESS_MESSAGE = "User and conversations successfully deleted"

# DynamoDB low-level attribute value, e.g. {"S": "abc"}
AttributeValue = dict[str, Any]


class DeletionRequest(BaseModel):
    """Request model for deleting a user account."""

    email: str = Field(..., min_length=1)

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"email": "someone@example.com"}]}
    )

    @classmethod
    def from_body(cls, raw_body: Any) -> "DeletionRequest":
        """
        Parse a raw JSON request body.

        Raises:
            BadRequestError: If the body is not a JSON object with a non-empty
                string ``email``.
        """
        try:
            payload = json.loads(raw_body or "{}")
        except (ValueError, TypeError) as e:
            # TypeError: a direct invoke can carry an already-decoded body
            raise BadRequestError(f"Invalid request: {e}") from e

        if not isinstance(payload, dict):
            raise BadRequestError("Invalid request: Request body must be a JSON object")
        if not payload.get("email"):
            raise BadRequestError("Invalid request: Missing required field: email")

        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            reason = e.errors()[0]["msg"]
            raise BadRequestError(f"Invalid request: email: {reason}") from e


class DependentRecord(BaseModel):
    """Key of one conversation record owned by the account being deleted."""

    primary_key: AttributeValue
    secondary_key: AttributeValue | None = None


class DeletionResult(BaseModel):
    """Outcome of a deletion request."""

    status_code: int
    message: str


class LambdaResponse(BaseModel):
    """API Gateway proxy response."""

    statusCode: int
    headers: dict[str, str]
    body: str

    @classmethod
    def from_result(
        cls, result: DeletionResult, headers: dict[str, str]
    ) -> "LambdaResponse":
        return cls(
            statusCode=result.status_code,
            headers=headers,
            body=json.dumps({"message": result.message}),
        )
