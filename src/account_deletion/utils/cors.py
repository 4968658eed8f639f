import json
from collections.abc import Mapping
from typing import Any, Protocol

from structlog import get_logger

logger = get_logger(__name__)

FALLBACK_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "OPTIONS, POST",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Credentials": "true",
}


class CorsHeaderSource(Protocol):
    def get_headers(self, event: Mapping[str, Any]) -> dict[str, str]: ...


class LambdaCorsHeaders:
    """
    Negotiates CORS headers by invoking a shared Lambda function.

    The function receives the inbound event and answers with a payload
    carrying a ``headers`` mapping. Any failure falls back to
    FALLBACK_CORS_HEADERS.
    """

    def __init__(self, client: Any, function_name: str):
        self._client = client
        self._function_name = function_name

    def get_headers(self, event: Mapping[str, Any]) -> dict[str, str]:
        try:
            response = self._client.invoke(
                FunctionName=self._function_name,
                InvocationType="RequestResponse",
                Payload=json.dumps(event, default=str),
            )
            if response.get("FunctionError"):
                raise ValueError(f"function error: {response['FunctionError']}")
            payload = json.loads(response["Payload"].read())
            headers = payload["headers"]
            if not isinstance(headers, Mapping):
                raise ValueError("headers is not a mapping")
            return {str(k): str(v) for k, v in headers.items()}
        except Exception as e:
            logger.warning(
                "CORS negotiation failed, using fallback headers",
                function_name=self._function_name,
                error=str(e),
            )
            return dict(FALLBACK_CORS_HEADERS)
