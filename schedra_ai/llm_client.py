"""
Gemini client with key rotation, overload retries and a fallback model.

Rationale:
- Use the google-generativeai SDK for Gemini access.
- Keep the interface tiny: `await client.generate(prompt) -> str`.
- Several API keys share the load: a key that hits its quota is skipped,
  an overloaded model is retried on the same key with exponential backoff,
  and when every key is out of quota one last call goes to a stable model.
- Anything unexpected fails fast; the caller decides what to do with it.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import google.generativeai as genai

from .errors import (
    ConfigurationError,
    QuotaExhaustedError,
    UnclassifiedUpstreamError,
)
from .utils import mask_key

logger = logging.getLogger(__name__)

# (api_key, model_name, prompt) -> response text
Transport = Callable[[str, str, str], Awaitable[str]]
Sleep = Callable[[float], Awaitable[None]]

QUOTA = "quota"
OVERLOAD = "overload"
OTHER = "other"


async def gemini_transport(api_key: str, model_name: str, prompt: str) -> str:
    """
    Call Gemini once with the given key and model.
    """
    # configure() and model construction run before the first await,
    # so concurrent requests cannot swap keys under each other
    genai.configure(api_key=api_key)
    model = genai.GenerativeModel(model_name=model_name)
    response = await model.generate_content_async(prompt)

    try:
        result = response.text
    except ValueError:
        # response.text raises when the candidate was blocked or has no parts
        if response.candidates:
            raise RuntimeError(
                f"Gemini blocked response. Finish reason: {response.candidates[0].finish_reason}"
            )
        raise RuntimeError("Gemini returned no candidates.")

    if not result:
        raise RuntimeError("Gemini returned empty response")
    return result


def classify_error(error: BaseException) -> str:
    message = str(error).lower()
    if "429" in message or "quota" in message:
        return QUOTA
    if "503" in message or "overload" in message:
        return OVERLOAD
    return OTHER


class KeyCursor:
    """Index of the key that last succeeded; where the next rotation starts."""

    def __init__(self, index: int = 0):
        self._index = index
        self._lock = threading.Lock()

    @property
    def index(self) -> int:
        with self._lock:
            return self._index

    def set(self, index: int) -> None:
        with self._lock:
            self._index = index


@dataclass
class GenerationAttempt:
    key_index: int
    model: str
    retry: int
    delay_ms: float
    outcome: str = "pending"


class GenerationClient:
    def __init__(
        self,
        api_keys: List[str],
        model: str,
        fallback_model: str,
        retries: int = 2,
        initial_delay_ms: float = 1000,
        cursor: Optional[KeyCursor] = None,
        transport: Optional[Transport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.api_keys = list(api_keys)
        self.model = model
        self.fallback_model = fallback_model
        self.retries = retries
        self.initial_delay_ms = initial_delay_ms
        self.cursor = cursor or KeyCursor()
        self._transport = transport or gemini_transport
        self._sleep = sleep

    async def generate(self, prompt: str) -> str:
        """
        Return Gemini's text for `prompt`.

        Raises:
            ConfigurationError: no API keys configured.
            UnclassifiedUpstreamError: a non-quota error, or overload after
                the last retry. Remaining keys are not tried.
            QuotaExhaustedError: every key hit its quota and the fallback
                model failed as well.
        """
        if not self.api_keys:
            raise ConfigurationError("No Gemini API keys configured")

        attempts: List[GenerationAttempt] = []
        total = len(self.api_keys)
        start = self.cursor.index % total
        delay_ms = self.initial_delay_ms

        for k in range(total):
            key_idx = (start + k) % total
            key = self.api_keys[key_idx]
            logger.info(f"Trying key #{key_idx + 1} ({mask_key(key)})")

            for retry in range(self.retries):
                attempt = GenerationAttempt(key_idx, self.model, retry, delay_ms)
                attempts.append(attempt)
                try:
                    logger.info(f"Requesting {self.model}...")
                    text = await self._transport(key, self.model, prompt)
                except Exception as e:
                    kind = classify_error(e)
                    attempt.outcome = kind
                    if kind == QUOTA:
                        logger.warning(f"Key #{key_idx + 1} quota exceeded for {self.model}.")
                        break
                    if kind == OVERLOAD and retry < self.retries - 1:
                        logger.warning(f"Overload. Retrying in {delay_ms:.0f}ms...")
                        await self._sleep(delay_ms / 1000)
                        delay_ms *= 2
                        continue
                    logger.error(f"Key #{key_idx + 1} failed on {self.model}: {e}")
                    raise UnclassifiedUpstreamError(f"Gemini API error: {e}", attempts) from e

                attempt.outcome = "ok"
                self.cursor.set(key_idx)
                return text

        logger.error(f"All keys exhausted for {self.model}. Falling back to {self.fallback_model}...")
        attempt = GenerationAttempt(0, self.fallback_model, 0, 0)
        attempts.append(attempt)
        try:
            text = await self._transport(self.api_keys[0], self.fallback_model, prompt)
        except Exception as e:
            attempt.outcome = classify_error(e)
            logger.error(f"Fallback model {self.fallback_model} failed: {e}")
            raise QuotaExhaustedError(
                f"All keys exhausted and fallback model failed: {e}", attempts
            ) from e
        attempt.outcome = "ok"
        return text
