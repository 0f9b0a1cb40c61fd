"""Services for the Louisiana Business Assistant."""
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError
from .relay import ChatRelay, RelayResult
from .action_items import extract_action_items, strip_action_items, PROGRESS_MARKER
from .prompt_builder import build_system_prompt
from .fallback import generate_fallback_response, FallbackRule, FALLBACK_RULES
from .dispatcher import ChatDispatcher, DispatchError
from .intent_parser import parse_business_intent, BusinessIntent
from .chat_session import ChatSession

__all__ = ['LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'ChatRelay', 'RelayResult', 'extract_action_items', 'strip_action_items', 'PROGRESS_MARKER', 'build_system_prompt', 'generate_fallback_response', 'FallbackRule', 'FALLBACK_RULES', 'ChatDispatcher', 'DispatchError', 'parse_business_intent', 'BusinessIntent', 'ChatSession']
