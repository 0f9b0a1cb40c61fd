"""Unit tests for the terminal chat client."""
import sys
sys.path.insert(0, 'backend')

from unittest.mock import Mock
import chat_cli
from models.action_item import ActionItem
from models.conversation import CompletionResult
from services.chat_session import ChatSession
from services.dispatcher import DispatchError


def _session():
    dispatcher = Mock()
    dispatcher.send_message.return_value = CompletionResult(
        message="Register with the Secretary of State.",
        progress_items=[ActionItem(id="a", title="Register", description="Use geauxBIZ", category="Legal")]
    )
    return ChatSession(dispatcher)


def test_parse_args_defaults():
    args = chat_cli.parse_args([])
    assert args.stage is None
    assert args.relay_url.endswith("/api/chat")


def test_parse_args_assessment():
    args = chat_cli.parse_args(["--stage", "startup", "--industry", "bakery", "--challenge", "funding"])
    assert (args.stage, args.industry, args.challenge) == ("startup", "bakery", "funding")


def test_commands():
    session = _session()
    session.send("How do I register?")

    assert "Register" in chat_cli.handle_command(session, "/items")
    assert "[x]" in chat_cli.handle_command(session, "/done 1")
    assert "No action item" in chat_cli.handle_command(session, "/done 9")
    assert "Unknown command" in chat_cli.handle_command(session, "/dance")
    assert chat_cli.handle_command(session, "/reset") == "Conversation cleared."
    assert session.messages == []
    assert chat_cli.handle_command(session, "/quit") is None


def test_format_items_empty():
    assert chat_cli.format_items(_session()) == "No action items yet."


def test_run_prints_reply_and_items(monkeypatch, capsys):
    inputs = iter(["/quit"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(inputs))

    chat_cli.run(_session(), initial_message="How do I register?")

    out = capsys.readouterr().out
    assert "Register with the Secretary of State." in out
    assert "Register: Use geauxBIZ" in out


def test_run_reports_dispatch_errors(monkeypatch, capsys):
    session = _session()
    session.dispatcher.send_message.side_effect = DispatchError("Overloaded", 500)
    inputs = iter(["Hello", ""])
    def fake_input(prompt):
        try:
            return next(inputs)
        except StopIteration:
            raise EOFError
    monkeypatch.setattr("builtins.input", fake_input)

    chat_cli.run(session)

    assert "Overloaded" in capsys.readouterr().out


def test_done_rejects_non_positive_numbers():
    session = _session()
    session.send("How do I register?")

    assert "No action item" in chat_cli.handle_command(session, "/done 0")
    assert "No action item" in chat_cli.handle_command(session, "/done -1")
    assert [item.completed for item in session.action_items] == [False]


def test_run_adds_hint_for_invalid_api_key(monkeypatch, capsys):
    session = _session()
    session.dispatcher.send_message.return_value = CompletionResult(message="Invalid API key", progress_items=[])
    monkeypatch.setattr("builtins.input", lambda prompt: "/quit")

    chat_cli.run(session, initial_message="Hi")

    out = capsys.readouterr().out
    assert "assistant> Invalid API key" in out
    assert "API key configuration" in out
