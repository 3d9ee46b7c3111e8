"""
Utility functions for phsettings

Argument assertions and small string helpers shared by the layout parser
and the pipeline processor.
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional

from phsettings.core.errors import ArgumentNullError


class Assert:
    """Precondition checks that fail fast with ArgumentNullError."""

    @staticmethod
    def argument_not_null(argument: Any, argument_name: str):
        if argument is None:
            raise ArgumentNullError(argument_name)

    @staticmethod
    def is_not_null(value: Any, name: str):
        if value is None:
            raise ArgumentNullError(name, hint=f"'{name}' is required here")


def get_last_part(value: str, separator: str = "/", default: Optional[str] = None) -> Optional[str]:
    """
    Get the part of a string after the last separator.

    Args:
        value: String to split
        separator: Separator to look for
        default: Returned when the separator does not occur

    Returns:
        The trailing part, or default when value has no separator
    """
    index = value.rfind(separator)
    if index < 0:
        return default
    return value[index + 1:]


class ListString:
    """
    Ordered list of values stored in a single delimited field.

    Empty entries are dropped, so "a||b|" holds two values.

    Usage:
        allowed = ListString(item["Allowed Controls"])
        for path in allowed:
            ...
    """

    def __init__(self, value: Optional[str] = None, separator: str = "|"):
        self.separator = separator
        self.items: List[str] = [
            part.strip() for part in (value or "").split(separator) if part.strip()
        ]

    def __iter__(self) -> Iterator[str]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, value: str) -> bool:
        return value in self.items

    def __str__(self) -> str:
        return self.separator.join(self.items)

    @property
    def count(self) -> int:
        return len(self.items)
