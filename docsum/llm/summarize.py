"""Document summarization over a chat-completions API with bounded retries.

Transient failures (timeouts, connection errors, 408/409/429 and 5xx
responses, malformed completions) are retried with a linear backoff of
``backoff * attempt`` seconds. Any other API error means the request itself
is wrong and is reported after a single attempt.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

import openai
from openai import OpenAI

from docsum.config import Settings
from docsum.deadline import Deadline, check_deadline
from docsum.errors import MalformedCompletion, SummarizationRejected, SummarizationUnavailable

from .client import chat_completion, get_client

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a concise summariser."
USER_PREFIX = "Summarise:\n\n"

RETRYABLE_STATUS_CODES = frozenset({408, 409, 429})


def build_messages(text: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"{USER_PREFIX}{text}"},
    ]


def is_retryable(exc: BaseException) -> bool:
    """Return True if the failure is transient and worth another attempt."""
    if isinstance(exc, openai.APIConnectionError):
        # includes APITimeoutError
        return True
    if isinstance(exc, (MalformedCompletion, openai.APIResponseValidationError)):
        # provider answered 200 with a body we cannot use
        return True
    if isinstance(exc, openai.APIStatusError):
        status = exc.status_code
        return status in RETRYABLE_STATUS_CODES or status >= 500
    return False


class SummarizationClient:
    """Summarize extracted text with a single chat completion per attempt."""

    def __init__(
        self,
        client: OpenAI,
        model: str,
        max_tokens: int = 1024,
        temperature: float = 0.2,
        timeout: float = 30.0,
        max_attempts: int = 3,
        backoff: float = 0.3,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.backoff = backoff
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[OpenAI] = None) -> "SummarizationClient":
        if client is None:
            if not settings.api_key:
                raise ValueError(
                    "OpenAI API key not found. Set OPENAI_API_KEY or add it to config/models.json."
                )
            client = get_client(settings.api_key, settings.base_url)
        return cls(
            client,
            settings.model,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
            max_attempts=settings.max_attempts,
            backoff=settings.backoff_seconds,
        )

    def summarize(self, text: str, deadline: Optional[Deadline] = None) -> str:
        """Return the trimmed summary of `text`.

        Raises SummarizationRejected on a non-retryable error response and
        SummarizationUnavailable once all attempts have failed.
        """
        messages = build_messages(text)
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_attempts + 1):
            check_deadline(deadline, f"summarization attempt {attempt}")
            try:
                content = chat_completion(
                    self.client,
                    self.model,
                    messages,
                    timeout=self.timeout,
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                )
                return content.strip()
            except (openai.APIError, MalformedCompletion) as exc:
                if not is_retryable(exc):
                    raise SummarizationRejected(
                        f"Summarization request rejected: {exc}", attempts=attempt
                    ) from exc
                last_error = exc

            if attempt < self.max_attempts:
                delay = self.backoff * attempt
                logger.warning(
                    "Summarization attempt %d/%d failed (%s); retrying in %.1fs",
                    attempt, self.max_attempts, last_error, delay,
                )
                check_deadline(deadline, f"summarization attempt {attempt + 1}", needed=delay)
                self._sleep(delay)

        raise SummarizationUnavailable(
            f"Summarization failed after {self.max_attempts} attempts: {last_error}",
            attempts=self.max_attempts,
        ) from last_error
