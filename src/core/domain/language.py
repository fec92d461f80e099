"""Locale utilities for the fault-code catalog.

This module centralizes the display languages supported across the
application. Keeping it in the domain layer lets repositories, services and
the CLI share a single source of truth without importing adapters.
"""

from __future__ import annotations

from enum import Enum


class Locale(str, Enum):
    """Supported display languages for catalog content."""

    ENGLISH = "en"
    TURKISH = "tr"

    @classmethod
    def default(cls) -> "Locale":
        """Return the default locale used across the application."""

        return cls.ENGLISH

    @classmethod
    def parse(cls, value: "str | Locale | None") -> "Locale":
        """Parse a user supplied locale code, defaulting to English."""

        if isinstance(value, Locale):
            return value
        code = (value or "").strip().lower()
        for member in cls:
            if member.value == code:
                return member
        return cls.default()

    def label(self) -> str:
        """Human readable label for prompts and logging."""

        return "Turkish" if self is Locale.TURKISH else "English"
