"""Completion API clients."""

from typing import Protocol

from .openai_client import CompletionResult, OpenAIClient


class CompletionClient(Protocol):
    """Anything that turns a prompt into a CompletionResult."""

    def complete(self, prompt: str, temperature: float, max_tokens: int) -> CompletionResult:
        ...


__all__ = ["CompletionClient", "CompletionResult", "OpenAIClient"]
