"""
Environment-driven settings.

Rationale:
- Read everything once from the process environment (after load_dotenv).
- Missing API keys are not fatal here; the route reports them per request.
"""

import os
from typing import List, Optional

from pydantic import BaseModel, Field

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_FALLBACK_MODEL = "gemini-flash-latest"


def parse_api_keys(raw: Optional[str]) -> List[str]:
    """Split a comma separated key list, dropping blanks."""
    if not raw:
        return []
    return [k.strip() for k in raw.split(",") if k.strip()]


def _parse_origins(raw: Optional[str]) -> List[str]:
    if not raw or raw.strip() == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    api_keys: List[str] = Field(default_factory=list)
    model_name: str = DEFAULT_MODEL
    fallback_model_name: str = DEFAULT_FALLBACK_MODEL
    retries: int = Field(2, ge=1)
    initial_delay_ms: int = Field(1000, ge=0)
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    port: int = 5000


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    return Settings(
        api_keys=parse_api_keys(os.getenv("GEMINI_API_KEY")),
        model_name=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
        fallback_model_name=os.getenv("GEMINI_FALLBACK_MODEL") or DEFAULT_FALLBACK_MODEL,
        retries=os.getenv("GEMINI_RETRIES", "2"),
        initial_delay_ms=os.getenv("GEMINI_RETRY_DELAY_MS", "1000"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_parse_origins(os.getenv("CORS_ORIGINS")),
        port=os.getenv("PORT", "5000"),
    )
