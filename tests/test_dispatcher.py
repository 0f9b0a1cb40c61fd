"""Unit tests for ChatDispatcher."""
import sys
sys.path.insert(0, 'backend')

import json
import logging
import httpx
import pytest
from models.assessment import AssessmentAnswers
from models.conversation import Message
from services.dispatcher import (
    ChatDispatcher,
    DispatchError,
    INVALID_API_KEY_MESSAGE,
    RATE_LIMITED_MESSAGE,
)

RELAY_URL = "http://relay.test/api/chat"
ANSWERS = AssessmentAnswers(stage="startup", industry="bakery", main_challenge="Finding customers")


def make_dispatcher(handler):
    """Dispatcher whose relay is served by an in-process mock transport."""
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ChatDispatcher(relay_url=RELAY_URL, client=client)


def respond(status_code, body):
    def handler(request):
        return httpx.Response(status_code, json=body)
    return handler


def unreachable(request):
    raise httpx.ConnectError("Connection refused", request=request)


class TestDispatcherRequest:
    """What the dispatcher sends to the relay."""

    def test_request_contains_history_new_turn_and_prompt(self):
        """Test the payload is prior turns plus the new user turn."""
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": "Sure."})

        history = [
            Message(role="user", content="Hi"),
            {"role": "assistant", "content": "Hello!"},
        ]
        make_dispatcher(handler).send_message("How do I hire?", history, ANSWERS)

        assert captured["url"] == RELAY_URL
        assert captured["body"]["messages"] == [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
            {"role": "user", "content": "How do I hire?"},
        ]
        assert "bakery" in captured["body"]["systemPrompt"]
        assert "PROGRESS_ITEMS:" in captured["body"]["systemPrompt"]

    def test_history_is_not_mutated(self):
        """Test the caller's history list is left untouched."""
        history = [{"role": "user", "content": "Hi"}]
        make_dispatcher(respond(200, {"message": "ok"})).send_message("Next", history, ANSWERS)
        assert history == [{"role": "user", "content": "Hi"}]


class TestDispatcherSuccess:
    """Successful relay responses."""

    def test_plain_reply(self):
        """Test a reply without a marker has no action items."""
        result = make_dispatcher(respond(200, {"message": "Talk to the LSBDC."})).send_message("Help", [], ANSWERS)

        assert result.message == "Talk to the LSBDC."
        assert result.progress_items == []

    def test_reply_with_progress_items(self):
        """Test trailing progress items are parsed and stripped from the text."""
        reply = (
            "Here is a plan.\n\n"
            'PROGRESS_ITEMS:[{"title": "Open a bank account", "description": "Separate finances", "category": "Finance"},'
            '{"title": "Get an EIN", "description": "Apply with the IRS", "category": "Legal"}]'
        )
        result = make_dispatcher(respond(200, {"message": reply})).send_message("Plan?", [], ANSWERS)

        assert result.message == "Here is a plan."
        assert [item.title for item in result.progress_items] == ["Open a bank account", "Get an EIN"]
        assert all(not item.completed for item in result.progress_items)

    def test_reply_with_malformed_progress_items(self):
        """Test malformed embedded JSON still yields the message."""
        reply = "Here is a plan.\nPROGRESS_ITEMS:[not valid json]"
        result = make_dispatcher(respond(200, {"message": reply})).send_message("Plan?", [], ANSWERS)

        assert result.message == "Here is a plan."
        assert result.progress_items == []


class TestDispatcherErrorStatuses:
    """Non-success relay statuses, in priority order."""

    def test_unauthorized_returns_fixed_message(self):
        """Test 401 yields the invalid-credential text and no items."""
        result = make_dispatcher(respond(401, {"error": "Invalid API key"})).send_message("Hi", [], ANSWERS)

        assert result.message == INVALID_API_KEY_MESSAGE == "Invalid API key"
        assert result.progress_items == []

    def test_rate_limited_returns_fixed_message(self):
        """Test 429 yields the rate-limit text and no items."""
        result = make_dispatcher(respond(429, {"error": "Rate limit exceeded"})).send_message("Hi", [], ANSWERS)

        assert result.message == RATE_LIMITED_MESSAGE
        assert result.progress_items == []

    def test_missing_server_key_uses_fallback(self):
        """Test a 500 about the missing credential falls through to canned guidance."""
        handler = respond(500, {"error": "API key not configured on server"})

        result = make_dispatcher(handler).send_message("I need help with funding for my bakery", [], ANSWERS)

        assert "Louisiana Economic Development" in result.message
        assert result.progress_items
        assert all(item.category == "Funding" for item in result.progress_items)

    def test_other_500_raises(self):
        """Test other server errors raise with the server's message."""
        dispatcher = make_dispatcher(respond(500, {"error": "Overloaded"}))

        with pytest.raises(DispatchError, match="Overloaded") as exc_info:
            dispatcher.send_message("Hi", [], ANSWERS)

        assert exc_info.value.status_code == 500

    def test_bad_request_raises(self):
        """Test a 400 from the relay raises."""
        dispatcher = make_dispatcher(respond(400, {"error": "Messages array is required"}))

        with pytest.raises(DispatchError, match="Messages array is required"):
            dispatcher.send_message("Hi", [], ANSWERS)

    def test_error_without_json_body_raises(self):
        """Test a non-JSON error body still raises a DispatchError."""
        dispatcher = make_dispatcher(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(DispatchError) as exc_info:
            dispatcher.send_message("Hi", [], ANSWERS)

        assert exc_info.value.status_code == 502


class TestDispatcherTransportFailure:
    """Relay unreachable."""

    def test_end_to_end_funding_scenario(self):
        """Test the funding question gets canned funding guidance when offline."""
        result = make_dispatcher(unreachable).send_message(
            "I need help with funding for my bakery", [], ANSWERS
        )

        assert "Louisiana Economic Development" in result.message
        assert len(result.progress_items) > 0
        assert {item.category for item in result.progress_items} == {"Funding"}

    def test_transport_failure_logs_warning(self, caplog):
        """Test the downgrade to the fallback is logged as a warning."""
        with caplog.at_level(logging.WARNING, logger="services.dispatcher"):
            make_dispatcher(unreachable).send_message("Hello", [], ANSWERS)

        assert any("fallback" in record.getMessage() for record in caplog.records)

    def test_timeout_uses_fallback(self):
        """Test a relay timeout is treated as a transport failure."""
        def timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = make_dispatcher(timeout).send_message("What permits do I need?", [], ANSWERS)

        assert {item.category for item in result.progress_items} == {"Legal"}

    def test_without_answers(self):
        """Test the dispatcher works before the assessment is completed."""
        result = make_dispatcher(unreachable).send_message("Hello", [])
        assert result.message
