"""Error taxonomy shared by the relay, its adapters and the dispatcher."""
from enum import Enum


class ErrorKind(Enum):
    """Failure kinds with the HTTP status and public message each maps to."""

    BAD_REQUEST = (400, "Messages array is required")
    UNAUTHORIZED = (401, "Invalid API key")
    RATE_LIMITED = (429, "Rate limit exceeded")
    SERVER_MISCONFIGURED = (500, "API key not configured on server")
    NO_TEXT_CONTENT = (500, "No text content in response")
    INTERNAL_ERROR = (500, "Internal server error")
    # Client-side only; never sent over the wire.
    TRANSPORT_FAILURE = (0, "Could not reach the chat service")
    PARSE_FAILURE = (0, "Malformed action item data")

    def __init__(self, status_code: int, public_message: str):
        self.status_code = status_code
        self.public_message = public_message
