"""Bounded retry with exponential backoff around completion calls."""

import logging
import time
from typing import Callable, Tuple

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..config import Config
from ..errors import CompletionError
from .clients import CompletionClient

logger = logging.getLogger(__name__)


def complete_with_retry(
    client: CompletionClient,
    prompt: str,
    temperature: float,
    max_tokens: int,
    config: Config,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[str, int]:
    """
    Call the client until it succeeds or ``config.max_attempts`` is reached.

    Backoff doubles from ``config.backoff_min`` and is capped at
    ``config.backoff_max`` (1s, 2s, 4s, ... 10s with the defaults).

    Returns:
        Tuple of (completion text, attempts used)

    Raises:
        ModelUnavailable / ModelError from the last attempt once retries
        are exhausted.
    """
    attempts = 0

    def _call() -> str:
        nonlocal attempts
        attempts += 1
        return client.complete(prompt, temperature, max_tokens).unwrap()

    retrying = Retrying(
        stop=stop_after_attempt(config.max_attempts),
        wait=wait_exponential(multiplier=config.backoff_min, min=config.backoff_min, max=config.backoff_max),
        retry=retry_if_exception_type(CompletionError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )
    text = retrying(_call)
    return text, attempts
