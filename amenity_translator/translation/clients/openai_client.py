"""OpenAI-compatible completion client (OpenRouter by default)."""

import logging
from dataclasses import dataclass
from typing import Optional

import openai
from openai import OpenAI

from ...config import Config
from ...errors import ConfigurationError, ModelError, ModelUnavailable

logger = logging.getLogger(__name__)

UNAVAILABLE = "unavailable"
MODEL_ERROR = "model_error"


@dataclass(frozen=True)
class CompletionResult:
    """Tagged result of a completion call: either text or an error kind."""

    text: Optional[str] = None
    error_kind: Optional[str] = None
    error_message: str = ""

    @classmethod
    def ok(cls, text: str) -> "CompletionResult":
        return cls(text=text)

    @classmethod
    def failure(cls, kind: str, message: str) -> "CompletionResult":
        return cls(error_kind=kind, error_message=message)

    @property
    def succeeded(self) -> bool:
        return self.error_kind is None

    def unwrap(self) -> str:
        """Return the text or raise the matching completion error."""
        if self.error_kind is None:
            return self.text or ""
        if self.error_kind == UNAVAILABLE:
            raise ModelUnavailable(self.error_message)
        raise ModelError(self.error_message)


class OpenAIClient:
    """
    Client for chat completions through the OpenAI SDK.

    Performs no retries and no caching: every call reaches the remote
    service and is billed, so callers own the retry policy.
    """

    def __init__(self, config: Config, model: Optional[str] = None):
        """
        Initialize the completion client.

        Args:
            config: Pipeline configuration (API key, base URL, model)
            model: Model identifier overriding ``config.model``
        """
        if not config.openrouter_api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is not set")
        self.client = OpenAI(
            api_key=config.openrouter_api_key,
            base_url=config.base_url,
            timeout=config.request_timeout,
            max_retries=0,
        )
        self.model = model or config.model

    def complete(self, prompt: str, temperature: float, max_tokens: int) -> CompletionResult:
        """
        Send a single-message completion request.

        Args:
            prompt: Full user prompt
            temperature: Sampling temperature
            max_tokens: Maximum output tokens

        Returns:
            CompletionResult carrying the generated text or the error kind
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIConnectionError as e:
            # Includes APITimeoutError
            logger.warning("Model %s unreachable: %s", self.model, e)
            return CompletionResult.failure(UNAVAILABLE, str(e))
        except openai.APIError as e:
            logger.warning("Model %s returned an error: %s", self.model, e)
            return CompletionResult.failure(MODEL_ERROR, str(e))

        if not response.choices:
            return CompletionResult.failure(MODEL_ERROR, "Response contained no choices")

        content = response.choices[0].message.content
        if content is None:
            return CompletionResult.failure(MODEL_ERROR, "Response message had no content")

        return CompletionResult.ok(content.strip())
