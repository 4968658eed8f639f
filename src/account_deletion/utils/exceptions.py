class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    def __init__(self, detail: str, status_code: int = 500):
        self.detail = detail
        self.status_code = status_code
        super().__init__(self.detail)


class NotFoundError(ServiceError):
    """Raised when the identity provider has no account for the user."""

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail, status_code=404)


class BadRequestError(ServiceError):
    """Raised for invalid client requests (e.g., bad input)."""

    def __init__(self, detail: str = "Bad request"):
        super().__init__(detail, status_code=400)


class UpstreamError(ServiceError):
    """Raised when a call to an AWS collaborator fails."""

    def __init__(self, detail: str = "Upstream call failed"):
        super().__init__(detail, status_code=500)
