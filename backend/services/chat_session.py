"""In-memory chat session: the conversation, its action items and context."""
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from models.action_item import ActionItem
from models.assessment import AssessmentAnswers
from models.conversation import CompletionResult, Message, USER, ASSISTANT
from services.dispatcher import ChatDispatcher
from services.intent_parser import BusinessIntent, parse_business_intent

logger = logging.getLogger(__name__)


class ChatSession:
    """
    Explicit session store passed to whatever drives the chat.

    Owns the message history, the accumulated action items and the
    assessment answers. Durable persistence belongs to the caller, which can
    snapshot the session with ``to_dict`` and restore it with ``from_dict``.
    """

    def __init__(
        self,
        dispatcher: ChatDispatcher,
        answers: Optional[AssessmentAnswers] = None,
        intent: Optional[BusinessIntent] = None
    ):
        self.dispatcher = dispatcher
        self.answers = answers or AssessmentAnswers()
        self.intent = intent
        self.messages: List[Message] = []
        self.action_items: List[ActionItem] = []

    @classmethod
    def from_landing_input(
        cls,
        dispatcher: ChatDispatcher,
        text: str,
        answers: Optional[AssessmentAnswers] = None
    ) -> "ChatSession":
        """Start a session from a landing-page sentence like "a bakery in Lafayette"."""
        intent = parse_business_intent(text)
        answers = answers or AssessmentAnswers()
        if not answers.industry:
            answers = AssessmentAnswers(
                stage=answers.stage,
                industry=intent.business_type,
                main_challenge=answers.main_challenge,
                has_business_plan=answers.has_business_plan
            )
        return cls(dispatcher, answers=answers, intent=intent)

    def send(self, user_text: str) -> CompletionResult:
        """
        Run one chat turn and record it.

        The user message is appended only once the dispatcher returns, so a
        DispatchError leaves the session unchanged.
        """
        history = list(self.messages)
        result = self.dispatcher.send_message(user_text, history, self.answers)

        self.messages.append(Message(role=USER, content=user_text))
        self.messages.append(Message(role=ASSISTANT, content=result.message))
        self._merge_items(result.progress_items)
        return result

    def _merge_items(self, items: List[ActionItem]) -> None:
        """Append new items, re-keying any whose id is already in the checklist."""
        taken = {item.id for item in self.action_items}
        for item in items:
            if item.id in taken:
                base, suffix = item.id, 2
                while f"{base}-{suffix}" in taken:
                    suffix += 1
                item = replace(item, id=f"{base}-{suffix}")
            taken.add(item.id)
            self.action_items.append(item)

    def toggle_item(self, item_id: str) -> ActionItem:
        for item in self.action_items:
            if item.id == item_id:
                item.completed = not item.completed
                return item
        raise KeyError(item_id)

    def progress(self) -> int:
        """Percentage of action items completed, rounded."""
        if not self.action_items:
            return 0
        completed = sum(1 for item in self.action_items if item.completed)
        return round(completed * 100 / len(self.action_items))

    def reset(self) -> None:
        logger.info(f"Resetting chat session: {len(self.messages)} messages discarded")
        self.messages = []
        self.action_items = []

    def to_dict(self) -> Dict[str, Any]:
        return {
            "answers": self.answers.to_dict(),
            "intent": (
                {"business_type": self.intent.business_type, "city": self.intent.city}
                if self.intent else None
            ),
            "messages": [
                {"role": m.role, "content": m.content, "timestamp": m.timestamp.isoformat()}
                for m in self.messages
            ],
            "action_items": [item.to_dict() for item in self.action_items],
        }

    @classmethod
    def from_dict(cls, dispatcher: ChatDispatcher, data: Dict[str, Any]) -> "ChatSession":
        intent_data = data.get("intent")
        session = cls(
            dispatcher,
            answers=AssessmentAnswers.from_dict(data.get("answers") or {}),
            intent=BusinessIntent(**intent_data) if intent_data else None
        )
        session.messages = [
            Message(role=m["role"], content=m["content"], timestamp=datetime.fromisoformat(m["timestamp"]))
            for m in data.get("messages", [])
        ]
        session.action_items = [ActionItem.from_dict(item) for item in data.get("action_items", [])]
        return session
