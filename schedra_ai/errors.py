"""
Exception types raised by the analytics pipeline.

Rationale:
- The HTTP layer maps each type to a status code (or to fallback data).
- Upstream errors keep the attempts that led to them for logging.
"""

from typing import List, Optional


class ConfigurationError(RuntimeError):
    """No API keys configured."""


class UnrecognizedTypeError(RuntimeError):
    """Analysis type has no prompt template."""

    def __init__(self, analysis_type):
        super().__init__(f"Invalid prediction type: {analysis_type!r}")
        self.analysis_type = analysis_type


class UpstreamGenerationError(RuntimeError):
    """Gemini could not produce a response for the prompt."""

    def __init__(self, message: str, attempts: Optional[List] = None):
        super().__init__(message)
        self.attempts = list(attempts or [])


class QuotaExhaustedError(UpstreamGenerationError):
    """Every key hit its quota and the fallback model failed too."""


class UnclassifiedUpstreamError(UpstreamGenerationError):
    """Non-quota failure, or overload with no retries left."""


class ResponseFormatError(RuntimeError):
    """Gemini answered, but the text is not a JSON object."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
