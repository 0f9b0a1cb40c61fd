"""Conversation data models."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from .action_item import ActionItem

USER = "user"
ASSISTANT = "assistant"
ROLES = (USER, ASSISTANT)


@dataclass
class Message:
    """A single chat turn as shown in the conversation."""
    role: str  # "user" or "assistant"
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_turn(self) -> Dict[str, str]:
        """Role/content pair in the shape the relay expects."""
        return {"role": self.role, "content": self.content}


@dataclass
class ConversationRequest:
    """Payload sent to the relay for one chat turn."""
    messages: List[Dict[str, str]]
    system_prompt: str

    def to_payload(self) -> Dict[str, Any]:
        return {"messages": self.messages, "systemPrompt": self.system_prompt}


@dataclass
class CompletionResult:
    """Assistant reply plus any suggested next steps parsed out of it."""
    message: str
    progress_items: List[ActionItem] = field(default_factory=list)
