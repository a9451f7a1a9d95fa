"""
Engine settings, read from the environment (and a local .env file).

    CITATION_STYLE            Bluebook | ALWD            (default Bluebook)
    CITATION_MAX_INPUT_CHARS  refuse longer input         (default: no limit)
    CITATION_LOG_LEVEL        CLI log level               (default WARNING)
"""
from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from .models import CitationStyle

load_dotenv()


class Settings(BaseModel):
    style: CitationStyle = CitationStyle.BLUEBOOK
    max_input_chars: int | None = None
    log_level: str = "WARNING"

    @field_validator("max_input_chars")
    @classmethod
    def _positive_limit(cls, value: int | None) -> int | None:
        if value is not None and value <= 0:
            raise ValueError("max_input_chars must be positive")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from CITATION_* environment variables."""
        return cls(
            style=os.getenv("CITATION_STYLE", CitationStyle.BLUEBOOK.value),
            max_input_chars=os.getenv("CITATION_MAX_INPUT_CHARS") or None,
            log_level=os.getenv("CITATION_LOG_LEVEL", "WARNING"),
        )
