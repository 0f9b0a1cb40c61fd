"""Parse a free-text landing-page goal into a business type and a city."""
import logging
import re
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_BUSINESS_TYPE = "business"
DEFAULT_CITY = "Louisiana"

# Tried in order; group 1 is the business type, group 2 the city.
INTENT_PATTERNS = (
    re.compile(r"(?:start|open|launch|create)\s+(?:a|an)\s+(.+?)\s+in\s+([^.!?]+)", re.IGNORECASE),
    re.compile(r"\b(?:a|an)\s+(.+?)\s+in\s+([^.!?]+)", re.IGNORECASE),
    re.compile(r"(.+?)\s+in\s+([^.!?]+)", re.IGNORECASE),
)


@dataclass(frozen=True)
class BusinessIntent:
    business_type: str
    city: str


def _match_patterns(text: str) -> Optional[BusinessIntent]:
    for pattern in INTENT_PATTERNS:
        match = pattern.search(text)
        if match:
            business_type, city = match.group(1).strip(), match.group(2).strip()
            if business_type and city:
                return BusinessIntent(business_type=business_type, city=city)
    return None


def _split_on_in(text: str) -> Optional[BusinessIntent]:
    words = text.split()
    if len(words) < 3:
        return None
    lowered = [w.lower() for w in words]
    if "in" not in lowered:
        return None
    index = lowered.index("in")
    if 0 < index < len(words) - 1:
        return BusinessIntent(business_type=" ".join(words[:index]), city=" ".join(words[index + 1:]))
    return None


def parse_business_intent(text: str) -> BusinessIntent:
    """
    Extract "what kind of business" and "where" from a sentence such as
    "I want to open a bakery in Baton Rouge".

    Never fails: unparseable input becomes the business type and the city
    defaults to Louisiana.
    """
    text = (text or "").strip()
    intent = _match_patterns(text) or _split_on_in(text)
    if intent is None:
        intent = BusinessIntent(business_type=text or DEFAULT_BUSINESS_TYPE, city=DEFAULT_CITY)
    logger.debug(f"Parsed intent: type={intent.business_type!r}, city={intent.city!r}")
    return intent
