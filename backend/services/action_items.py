"""Extraction of suggested next steps embedded in assistant replies."""
import json
import logging
import time
from typing import List, Optional

from models.action_item import ActionItem
from models.errors import ErrorKind

logger = logging.getLogger(__name__)

# Shared with prompt_builder, which instructs the model to emit it.
PROGRESS_MARKER = "PROGRESS_ITEMS:"


def extract_action_items(reply_text: str, timestamp_ms: Optional[int] = None) -> List[ActionItem]:
    """
    Parse the JSON array that follows ``PROGRESS_ITEMS:`` in a reply.

    Everything between the first ``[`` and the last ``]`` after the marker is
    decoded as a list of ``{title, description, category}`` objects. A missing
    marker or malformed JSON yields an empty list; this function never raises.

    Args:
        reply_text: Raw assistant reply
        timestamp_ms: Base for synthesized ids (defaults to the current time)

    Returns:
        Action items with synthesized ids and ``completed=False``
    """
    if not reply_text:
        return []

    marker_index = reply_text.find(PROGRESS_MARKER)
    if marker_index == -1:
        return []

    payload = reply_text[marker_index + len(PROGRESS_MARKER):]
    start = payload.find("[")
    end = payload.rfind("]")
    if start == -1 or end <= start:
        logger.error(
            "Progress marker present but no JSON array follows it",
            extra={"error_code": ErrorKind.PARSE_FAILURE.name}
        )
        return []

    try:
        raw_items = json.loads(payload[start:end + 1])
    except ValueError as e:
        logger.error(
            f"Failed to parse progress items: {e}",
            extra={"error_code": ErrorKind.PARSE_FAILURE.name}
        )
        return []

    if not isinstance(raw_items, list):
        return []

    base = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    items = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not raw.get("title"):
            logger.debug(f"Skipping progress item without a title: {raw!r}")
            continue
        category = raw.get("category")
        items.append(ActionItem(
            id=f"{base}-{len(items)}",
            title=str(raw["title"]),
            description=str(raw.get("description") or ""),
            completed=False,
            category=str(category) if category else None
        ))

    logger.debug(f"Extracted {len(items)} progress items")
    return items


def strip_action_items(reply_text: str) -> str:
    """Return the reply with the trailing progress-item section removed."""
    marker_index = reply_text.find(PROGRESS_MARKER)
    if marker_index == -1:
        return reply_text.strip()
    return reply_text[:marker_index].rstrip()
