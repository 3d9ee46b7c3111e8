"""
phsettings Error Definitions
Exception classes with optional source location information for layout errors.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class SourceLocation:
    """Represents a location in a layout definition for error reporting."""
    line: int
    column: int
    source: Optional[str] = None

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}:{self.line}:{self.column}"
        return f"line {self.line}, column {self.column}"


class PhSettingsError(Exception):
    """Base exception for all phsettings errors."""

    def __init__(
            self,
            message: str,
            location: Optional[SourceLocation] = None,
            hint: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = []
        if self.location:
            parts.append(f"[{self.location}] ")
        parts.append(self.message)
        if self.hint:
            parts.append(f"\n  Hint: {self.hint}")
        return "".join(parts)


class ArgumentNullError(PhSettingsError, ValueError):
    """A required argument was None."""

    def __init__(self, argument_name: str, hint: Optional[str] = None):
        self.argument_name = argument_name
        super().__init__(f"Argument '{argument_name}' cannot be None", hint=hint)


class LayoutParseError(PhSettingsError):
    """The layout definition could not be interpreted."""
    pass


class ConfigError(PhSettingsError):
    """Error in configuration loading or validation."""
    pass
