# src/amlich/core/errors.py
from __future__ import annotations

from typing import Any, Optional


class LunarCalendarError(Exception):
    """
    Base error for every conversion failure.

    `field` / `value` name the offending input so callers can build
    a user-facing message without parsing the text.
    """

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class OutOfRangeError(LunarCalendarError, ValueError):
    """Input outside the validated era (years 1200..2999) or timezone range."""


class InvalidGregorianDateError(LunarCalendarError, ValueError):
    """Impossible civil date (e.g. Feb 30)."""


class InvalidLunarDateError(LunarCalendarError, ValueError):
    """Impossible lunar date or a leap month that the year does not have."""


class ConvergenceError(LunarCalendarError, RuntimeError):
    """A bounded search ran out of steps. Indicates unsupported input, never retried."""
