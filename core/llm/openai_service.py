"""
OpenAI Service - Inference client for any OpenAI-compatible endpoint.

Each call is one user message and one reply. Calls carry their own
timeout so an unresponsive request cannot hold a scoring worker forever,
and transient failures are retried here before the pipeline sees them.
"""
from typing import Dict, Any, Optional
import logging
import re

import openai
from openai import OpenAI
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from core.exceptions import RateLimitedError, TransportError
from core.llm.interfaces import LLMProvider

logger = logging.getLogger(__name__)

# Errors worth another attempt; anything else fails the call at once
TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)

MAX_DECLARED_WAIT_SECONDS = 120.0
RESET_HEADERS = ("x-ratelimit-reset-requests", "x-ratelimit-reset-tokens")

_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
_DURATION_PART = re.compile(r"([\d.]+)(ms|s|m|h)")
_backoff = wait_exponential(multiplier=1, min=2, max=60)


def _duration_seconds(value: str) -> float:
    """'1m30s' -> 90.0, '500ms' -> 0.5; unparseable text counts as 0."""
    return sum(float(amount) * _UNIT_SECONDS[unit] for amount, unit in _DURATION_PART.findall(value or ""))


def _server_declared_wait(exc: openai.RateLimitError) -> float:
    """Longest wait announced by ``retry-after`` or the OpenAI reset headers, else 0."""
    headers = getattr(getattr(exc, "response", None), "headers", None)
    if not headers:
        return 0.0

    waits = [_duration_seconds(headers.get(name) or "") for name in RESET_HEADERS]
    try:
        waits.append(float(headers.get("retry-after") or 0))
    except ValueError:
        logger.debug(f"Ignoring non-numeric retry-after header: {headers.get('retry-after')!r}")
    return max(waits)


def _retry_wait(retry_state: RetryCallState) -> float:
    exc = retry_state.outcome.exception()
    if isinstance(exc, openai.RateLimitError):
        declared = min(_server_declared_wait(exc), MAX_DECLARED_WAIT_SECONDS)
        if declared > 0:
            return declared
    return _backoff(retry_state)


def _before_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception()
    kind = "Rate limited" if isinstance(exc, openai.RateLimitError) else "Transient inference error"
    wait = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(f"{kind} on attempt {retry_state.attempt_number}; retrying in {wait:.1f}s. Details: {exc}")


class OpenAIService(LLMProvider):
    """
    Chat-completions client behind the LLMProvider interface.

    Callers only ever see ``TransportError`` or ``RateLimitedError``; the
    OpenAI SDK's own retries are disabled in favour of the tenacity policy.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model_config: Optional[Dict[str, Any]] = None,
    ):
        self.model_config = model_config or {}
        self.model = self.model_config.get('model', 'gpt-4o-mini')
        self.temperature = self.model_config.get('temperature', 0.0)
        self.request_timeout = self.model_config.get('request_timeout_seconds', 60.0)
        self.max_retries = self.model_config.get('max_retries', 5)

        self._client_kwargs = {
            'max_retries': 0,
            'timeout': self.request_timeout,
        }
        if api_key:
            self._client_kwargs['api_key'] = api_key
        if base_url:
            self._client_kwargs['base_url'] = base_url

        self._client: Optional[OpenAI] = None

    @property
    def client(self) -> OpenAI:
        # Built on first call so commands that never infer need no API key
        if self._client is None:
            self._client = OpenAI(**self._client_kwargs)
        return self._client

    @client.setter
    def client(self, value: OpenAI) -> None:
        self._client = value

    def _retrying(self) -> Retrying:
        return Retrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            wait=_retry_wait,
            stop=stop_after_attempt(max(1, self.max_retries)),
            before_sleep=_before_retry,
            reraise=True,
        )

    def _create_completion(self, prompt: str):
        return self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.temperature,
            timeout=self.request_timeout,
        )

    def complete(self, prompt: str) -> str:
        try:
            response = self._retrying()(self._create_completion, prompt)
        except openai.RateLimitError as e:
            raise RateLimitedError(f"Inference service rate limit persisted: {e}") from e
        except openai.OpenAIError as e:
            raise TransportError(f"Inference service call failed: {e}") from e

        try:
            content = response.choices[0].message.content
        except (IndexError, AttributeError) as e:
            raise TransportError(f"Inference service returned no choices: {e}") from e

        logger.debug(f"Completion from {self.model}: {len(content or '')} chars")
        return content or ""
