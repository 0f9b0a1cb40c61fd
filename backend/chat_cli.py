"""
Terminal chat client for the Louisiana Business Assistant.

Talks to the relay through ChatDispatcher, so it works with or without a
provider API key (falling back to canned guidance when none is available).

Usage:
    python chat_cli.py --stage startup --industry bakery
    python chat_cli.py --goal "open a coffee shop in Lafayette"

Commands inside the chat:
    /items      show action items
    /done N     toggle action item N
    /reset      clear the conversation
    /quit       exit
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from config import RELAY_URL, RELAY_TIMEOUT
from models.assessment import AssessmentAnswers, STAGE_DESCRIPTIONS
from services.chat_session import ChatSession
from services.dispatcher import ChatDispatcher, DispatchError, INVALID_API_KEY_MESSAGE

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with the Louisiana Business Assistant")
    parser.add_argument("--relay-url", default=RELAY_URL, help="Chat relay endpoint")
    parser.add_argument("--timeout", type=float, default=RELAY_TIMEOUT, help="Relay timeout in seconds")
    parser.add_argument("--stage", choices=sorted(STAGE_DESCRIPTIONS), help="Business stage")
    parser.add_argument("--industry", help="Industry or business type")
    parser.add_argument("--challenge", help="Main challenge you are facing")
    parser.add_argument("--goal", help='Landing-page goal, e.g. "open a bakery in Baton Rouge"')
    return parser.parse_args(argv)


def format_items(session: ChatSession) -> str:
    if not session.action_items:
        return "No action items yet."
    lines = [f"Progress: {session.progress()}%"]
    for index, item in enumerate(session.action_items, start=1):
        mark = "x" if item.completed else " "
        category = f" [{item.category}]" if item.category else ""
        lines.append(f"{index:>2}. [{mark}] {item.title}{category} - {item.description}")
    return "\n".join(lines)


def handle_command(session: ChatSession, command: str) -> Optional[str]:
    """Run a slash command; returns text to print, or None to quit."""
    name, _, argument = command.partition(" ")
    if name == "/quit":
        return None
    if name == "/reset":
        session.reset()
        return "Conversation cleared."
    if name == "/items":
        return format_items(session)
    if name == "/done":
        try:
            number = int(argument)
            if number < 1:
                raise IndexError(number)
            item = session.action_items[number - 1]
        except (ValueError, IndexError):
            return f"No action item {argument!r}."
        session.toggle_item(item.id)
        return format_items(session)
    return f"Unknown command: {name}"


def run(session: ChatSession, initial_message: Optional[str] = None) -> None:
    pending = initial_message
    while True:
        if pending is None:
            try:
                pending = input("\nyou> ").strip()
            except EOFError:
                return
        text, pending = pending, None
        if not text:
            continue

        if text.startswith("/"):
            output = handle_command(session, text)
            if output is None:
                return
            print(output)
            continue

        try:
            result = session.send(text)
        except DispatchError as e:
            print(f"\nassistant> I'm sorry, something went wrong: {e}")
            continue

        print(f"\nassistant> {result.message}")
        if result.message == INVALID_API_KEY_MESSAGE:
            print("(Ask the site administrator to check the server's API key configuration.)")
        if result.progress_items:
            print("\nSuggested next steps:")
            for item in result.progress_items:
                print(f"  - {item.title}: {item.description}")


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    dispatcher = ChatDispatcher(relay_url=args.relay_url, timeout=args.timeout)
    answers = AssessmentAnswers(stage=args.stage, industry=args.industry, main_challenge=args.challenge)

    if args.goal:
        session = ChatSession.from_landing_input(dispatcher, args.goal, answers)
        logger.info(f"Starting session for {session.intent.business_type} in {session.intent.city}")
        run(session, initial_message=args.goal)
    else:
        run(ChatSession(dispatcher, answers=answers))


if __name__ == "__main__":
    main()
