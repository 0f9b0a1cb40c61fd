"""
Chat relay: validates a conversation payload and forwards it to the provider.

The relay is transport-agnostic. ``ChatRelay.handle`` takes the decoded JSON
body and returns a ``RelayResult``; the FastAPI route and the serverless
function are thin adapters that only translate it into their own response
objects.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import logging

from config import PROVIDER_API_KEY, LLM_PROVIDER, MAX_OUTPUT_TOKENS
from models.conversation import ROLES
from models.errors import ErrorKind
from services.llm_client import LLMClient, LLMClientError

logger = logging.getLogger(__name__)

INVALID_MESSAGE_ENTRY = "Each message requires a role of 'user' or 'assistant' and string content"

# LLMError.code -> ErrorKind
_ERROR_CODE_KINDS = {
    "AUTHENTICATION_ERROR": ErrorKind.UNAUTHORIZED,
    "RATE_LIMIT_ERROR": ErrorKind.RATE_LIMITED,
    "NO_TEXT_CONTENT": ErrorKind.NO_TEXT_CONTENT,
}


@dataclass
class RelayResult:
    """
    Outcome of one relay call.

    Attributes:
        status_code: HTTP status the adapters should answer with
        body: JSON body, either ``{"message": ...}`` or ``{"error": ...}``
        error_kind: Failure kind when the call did not succeed
    """
    status_code: int
    body: Dict[str, Any]
    error_kind: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, message: str) -> "RelayResult":
        return cls(status_code=200, body={"message": message})

    @classmethod
    def failure(cls, kind: ErrorKind, message: Optional[str] = None) -> "RelayResult":
        return cls(
            status_code=kind.status_code,
            body={"error": message or kind.public_message},
            error_kind=kind
        )


class ChatRelay:
    """Stateless handler forwarding chat requests to the completion provider."""

    def __init__(
        self,
        api_key: Optional[str] = PROVIDER_API_KEY,
        provider: str = LLM_PROVIDER,
        client_factory: Callable[..., LLMClient] = LLMClient,
        max_tokens: int = MAX_OUTPUT_TOKENS
    ):
        self.api_key = api_key
        self.provider = provider
        self.client_factory = client_factory
        self.max_tokens = max_tokens
        self._client: Optional[LLMClient] = None

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    def handle(self, payload: Any) -> RelayResult:
        """
        Process a decoded ``{"messages": [...], "systemPrompt": "..."}`` body.

        Checks run in order: credential configured, then ``messages`` present
        and a list. The provider is never called when either check fails.
        """
        if not self.has_api_key:
            logger.error("Chat request rejected: provider API key not configured")
            return RelayResult.failure(ErrorKind.SERVER_MISCONFIGURED)

        messages = payload.get("messages") if isinstance(payload, dict) else None
        if not isinstance(messages, list):
            logger.warning("Chat request rejected: messages array missing")
            return RelayResult.failure(ErrorKind.BAD_REQUEST)

        if not all(_is_valid_turn(m) for m in messages):
            logger.warning("Chat request rejected: malformed message entry")
            return RelayResult.failure(ErrorKind.BAD_REQUEST, INVALID_MESSAGE_ENTRY)

        system_prompt = payload.get("systemPrompt")
        if not isinstance(system_prompt, str):
            system_prompt = None

        turns = [{"role": m["role"], "content": m["content"]} for m in messages]
        logger.info(f"Relaying chat request: turns={len(turns)}, provider={self.provider}")

        try:
            response = self._get_client().complete(
                messages=turns,
                system_prompt=system_prompt,
                max_tokens=self.max_tokens
            )
        except LLMClientError as e:
            return self._map_error(e)
        except Exception as e:
            logger.error(f"Unexpected relay error: {e}", exc_info=True)
            return RelayResult.failure(ErrorKind.INTERNAL_ERROR, str(e) or None)

        return RelayResult.success(response.text)

    def _get_client(self) -> LLMClient:
        if self._client is None:
            self._client = self.client_factory(api_key=self.api_key, provider=self.provider)
        return self._client

    @staticmethod
    def _map_error(exc: LLMClientError) -> RelayResult:
        kind = _ERROR_CODE_KINDS.get(exc.error.code)
        if kind is not None:
            return RelayResult.failure(kind)

        provider_message = exc.error.details.get("original_error") or exc.error.message
        logger.error(f"Provider failure mapped to internal error: {exc.error.code}")
        return RelayResult.failure(ErrorKind.INTERNAL_ERROR, provider_message or None)


def _is_valid_turn(message: Any) -> bool:
    return (
        isinstance(message, dict)
        and message.get("role") in ROLES
        and isinstance(message.get("content"), str)
    )
