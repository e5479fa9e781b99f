# errors.py
from typing import Optional


class APIError(Exception):
    """Base error rendered as {success: false, message, error?}."""

    status_code = 500

    def __init__(self, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.error = error

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(APIError):
    status_code = 400


class NotFoundError(APIError):
    status_code = 404


class StorageError(APIError):
    """Raised when the datastore can't be read or written."""

    status_code = 500


class RouteNotFoundError(APIError):
    status_code = 404

    def __init__(self, requested_url: str):
        super().__init__("Route not found")
        self.requested_url = requested_url

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["requestedUrl"] = self.requested_url
        return body
