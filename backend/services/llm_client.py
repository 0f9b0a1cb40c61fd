"""LLM Client for the hosted completion providers (Anthropic, Groq)."""
import time
from dataclasses import dataclass, field
from typing import List, Optional, Dict, Any, NoReturn
import logging

import anthropic
import groq
from anthropic import Anthropic
from groq import Groq

from config import (
    LLM_PROVIDER,
    ANTHROPIC_API_KEY,
    GROQ_API_KEY,
    ANTHROPIC_MODEL,
    GROQ_MODEL,
    MAX_OUTPUT_TOKENS,
    PROVIDER_TIMEOUT,
)

logger = logging.getLogger(__name__)

PROVIDERS = ("anthropic", "groq")

_AUTH_ERRORS = (anthropic.AuthenticationError, groq.AuthenticationError)
_RATE_LIMIT_ERRORS = (anthropic.RateLimitError, groq.RateLimitError)
_TIMEOUT_ERRORS = (anthropic.APITimeoutError, groq.APITimeoutError)
_API_ERRORS = (anthropic.APIError, groq.APIError)


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    status_code: int = 500


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMClient:
    """Client forwarding a conversation to the configured completion provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = PROVIDER_TIMEOUT
    ):
        """
        Initialize LLM client for the selected provider.

        Args:
            api_key: Provider API key (defaults to the provider's key from environment)
            provider: "anthropic" or "groq" (defaults to LLM_PROVIDER)
            model: Model name (defaults to the provider's configured model)
            timeout: Seconds to wait for the provider before giving up
        """
        self.provider = (provider or LLM_PROVIDER).lower()
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unsupported LLM provider: {self.provider}")

        if self.provider == "anthropic":
            self.api_key = api_key or ANTHROPIC_API_KEY
            self.model = model or ANTHROPIC_MODEL
        else:
            self.api_key = api_key or GROQ_API_KEY
            self.model = model or GROQ_MODEL

        if not self.api_key:
            raise ValueError(f"API key for provider '{self.provider}' must be provided or set in environment")

        if self.provider == "anthropic":
            self.client = Anthropic(api_key=self.api_key, timeout=timeout)
        else:
            self.client = Groq(api_key=self.api_key, timeout=timeout)
        logger.info(f"LLMClient initialized: provider={self.provider}, model={self.model}")

    def complete(
        self,
        messages: List[Dict[str, str]],
        system_prompt: Optional[str] = None,
        max_tokens: int = MAX_OUTPUT_TOKENS
    ) -> LLMResponse:
        """
        Generate the assistant's next turn for a conversation.

        Args:
            messages: Ordered role/content turns ("user" or "assistant")
            system_prompt: Instruction sent alongside the conversation
            max_tokens: Cap on generated tokens

        Returns:
            LLMResponse holding the first text block of the reply

        Raises:
            LLMClientError: Structured error with code, message, details and HTTP status
        """
        start_time = time.time()

        try:
            logger.debug(f"Requesting completion: provider={self.provider}, turns={len(messages)}")

            if self.provider == "anthropic":
                text, tokens_input, tokens_output = self._complete_anthropic(messages, system_prompt, max_tokens)
            else:
                text, tokens_input, tokens_output = self._complete_groq(messages, system_prompt, max_tokens)

            latency_ms = int((time.time() - start_time) * 1000)
            logger.info(
                f"Generated response: provider={self.provider}, model={self.model}, "
                f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
                f"latency={latency_ms}ms"
            )

            return LLMResponse(
                text=text,
                tokens_input=tokens_input,
                tokens_output=tokens_output,
                latency_ms=latency_ms,
                model_used=self.model
            )

        except LLMClientError:
            raise

        except _AUTH_ERRORS as e:
            self._fail("AUTHENTICATION_ERROR", "Authentication failed. Please check your API key.", e, start_time, 401)

        except _RATE_LIMIT_ERRORS as e:
            self._fail(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                e,
                start_time,
                429,
                retry_after=60
            )

        except _TIMEOUT_ERRORS as e:
            self._fail("TIMEOUT_ERROR", "Request timed out. Please try again.", e, start_time)

        except _API_ERRORS as e:
            self._fail("API_ERROR", f"{self.provider.capitalize()} API error: {str(e)}", e, start_time)

        except Exception as e:
            self._fail(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                e,
                start_time,
                error_type=type(e).__name__
            )

    def _complete_anthropic(self, messages, system_prompt, max_tokens):
        request_params: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": messages,
        }
        if system_prompt:
            request_params["system"] = system_prompt

        response = self.client.messages.create(**request_params)

        text_block = next((block for block in response.content if block.type == "text"), None)
        if text_block is None:
            self._no_text_content()

        return text_block.text, response.usage.input_tokens, response.usage.output_tokens

    def _complete_groq(self, messages, system_prompt, max_tokens):
        chat_messages = list(messages)
        if system_prompt:
            chat_messages.insert(0, {"role": "system", "content": system_prompt})

        response = self.client.chat.completions.create(
            model=self.model,
            messages=chat_messages,
            max_tokens=max_tokens
        )

        text = response.choices[0].message.content if response.choices else None
        if not text:
            self._no_text_content()

        return text, response.usage.prompt_tokens, response.usage.completion_tokens

    def _no_text_content(self) -> NoReturn:
        error = LLMError(
            code="NO_TEXT_CONTENT",
            message="No text content in response",
            details={"provider": self.provider, "model": self.model}
        )
        logger.error(
            f"Provider returned no text block: provider={self.provider}, model={self.model}",
            extra={"error_code": error.code}
        )
        raise LLMClientError(error)

    def _fail(
        self,
        code: str,
        message: str,
        exc: Exception,
        start_time: float,
        status_code: int = 500,
        **extra_details: Any
    ) -> NoReturn:
        latency_ms = int((time.time() - start_time) * 1000)
        error = LLMError(
            code=code,
            message=message,
            details={
                "provider": self.provider,
                "model": self.model,
                "latency_ms": latency_ms,
                "original_error": str(exc),
                **extra_details
            },
            status_code=status_code
        )
        logger.error(
            f"{code}: provider={self.provider}, model={self.model}, latency={latency_ms}ms, error={exc}",
            exc_info=True,
            extra={"error_code": error.code, "error_details": error.details}
        )
        raise LLMClientError(error) from exc
