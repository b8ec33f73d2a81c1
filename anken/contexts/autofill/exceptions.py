"""Custom exceptions for the autofill context."""

from typing import Optional


class AINormalizationError(Exception):
    """
    Exception raised when the AI normalization endpoint cannot be used.

    Covers transport failures, timeouts, HTTP error statuses and responses
    that are not a JSON object. Callers fall back to the heuristic draft.

    Attributes:
        message: Error description
        endpoint: URL or name of the endpoint
        status_code: HTTP status, when a response was received
        original_error: The underlying exception
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if endpoint:
            parts.append(f"Endpoint: {endpoint}")

        if status_code is not None:
            parts.append(f"HTTP status: {status_code}")

        if original_error:
            parts.append(f"Original error: {type(original_error).__name__}: {original_error}")

        super().__init__("\n".join(parts))
