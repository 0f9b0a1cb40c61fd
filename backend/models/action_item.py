"""Action item data model."""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass
class ActionItem:
    """A suggested next step rendered as a checklist entry."""
    id: str
    title: str
    description: str
    completed: bool = False
    category: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActionItem":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            completed=bool(data.get("completed", False)),
            category=data.get("category"),
        )
