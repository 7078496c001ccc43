from typing import Optional


class StoreError(Exception):
    """Base exception for request store failures."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class RequestNotFoundError(StoreError):
    """Raised when a saved request id does not exist."""

    def __init__(self, request_id: int):
        super().__init__(f"Saved request {request_id} not found")
        self.request_id = request_id
