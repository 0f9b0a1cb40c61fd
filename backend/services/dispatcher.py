"""Client-side dispatcher orchestrating one chat turn against the relay."""
import logging
from typing import Dict, List, Optional, Sequence, Union

import httpx

from config import RELAY_URL, RELAY_TIMEOUT
from models.assessment import AssessmentAnswers
from models.conversation import CompletionResult, ConversationRequest, Message, USER
from models.errors import ErrorKind
from services.action_items import extract_action_items, strip_action_items
from services.fallback import generate_fallback_response
from services.prompt_builder import build_system_prompt

logger = logging.getLogger(__name__)

INVALID_API_KEY_MESSAGE = "Invalid API key"
RATE_LIMITED_MESSAGE = (
    "Rate limit exceeded: the chat service is receiving too many requests right now. "
    "Please wait a moment and try again."
)

# Substring of the relay's missing-credential error that triggers the fallback.
NOT_CONFIGURED_MARKER = "not configured"

HistoryEntry = Union[Message, Dict[str, str]]


class DispatchError(Exception):
    """Raised when the relay answers with an unexpected non-success status."""

    def __init__(self, message: str, status_code: int):
        self.status_code = status_code
        super().__init__(message)


class ChatDispatcher:
    """
    Sends chat turns to the relay and normalizes whatever comes back.

    Transport failures and a relay without a provider credential are
    downgraded to the deterministic fallback generator, so callers always
    receive a CompletionResult unless the relay reports an unexpected error.
    """

    def __init__(
        self,
        relay_url: str = RELAY_URL,
        timeout: float = RELAY_TIMEOUT,
        client: Optional[httpx.Client] = None
    ):
        self.relay_url = relay_url
        self.timeout = timeout
        self._client = client

    def send_message(
        self,
        user_text: str,
        history: Sequence[HistoryEntry],
        answers: Optional[AssessmentAnswers] = None
    ) -> CompletionResult:
        """
        Send the user's message with the prior conversation.

        Args:
            user_text: The new user message
            history: Prior turns, as Message objects or role/content dicts
            answers: Assessment answers rendered into the system prompt

        Returns:
            CompletionResult with the reply text and parsed action items

        Raises:
            DispatchError: The relay returned a non-success status other than
                401, 429 or a missing-credential 500
        """
        answers = answers or AssessmentAnswers()
        request = ConversationRequest(
            messages=[*_as_turns(history), {"role": USER, "content": user_text}],
            system_prompt=build_system_prompt(answers)
        )

        try:
            response = self._post(request)
        except httpx.TransportError as e:
            logger.warning(
                f"Relay unreachable, using fallback response: {e}",
                extra={"error_code": ErrorKind.TRANSPORT_FAILURE.name}
            )
            return generate_fallback_response(user_text, answers)

        if response.status_code == 401:
            logger.warning("Relay reported an invalid provider API key")
            return CompletionResult(message=INVALID_API_KEY_MESSAGE, progress_items=[])

        if response.status_code == 429:
            logger.warning("Relay reported provider rate limiting")
            return CompletionResult(message=RATE_LIMITED_MESSAGE, progress_items=[])

        body = _json_body(response)

        if not response.is_success:
            error_text = str(body.get("error") or response.reason_phrase or "Unknown error")
            if response.status_code == 500 and NOT_CONFIGURED_MARKER in error_text.lower():
                logger.warning("Relay has no provider API key configured, using fallback response")
                return generate_fallback_response(user_text, answers)
            logger.error(f"Relay error: status={response.status_code}, error={error_text}")
            raise DispatchError(error_text, response.status_code)

        reply = str(body.get("message") or "")
        items = extract_action_items(reply)
        logger.info(f"Received reply: length={len(reply)}, progress_items={len(items)}")
        return CompletionResult(message=strip_action_items(reply), progress_items=items)

    def _post(self, request: ConversationRequest) -> httpx.Response:
        if self._client is not None:
            return self._client.post(self.relay_url, json=request.to_payload(), timeout=self.timeout)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(self.relay_url, json=request.to_payload())


def _as_turns(history: Sequence[HistoryEntry]) -> List[Dict[str, str]]:
    turns = []
    for entry in history:
        if isinstance(entry, Message):
            turns.append(entry.to_turn())
        else:
            turns.append({"role": entry["role"], "content": entry["content"]})
    return turns


def _json_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
