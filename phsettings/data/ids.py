"""
Item identifiers.

IDs are GUIDs written in upper-case braces form, e.g.
{FE5D7FDF-89C0-4D99-9AA3-B5FBD009C9F3}. Parsing also accepts the bare and
lower-case forms.
"""
from __future__ import annotations

import uuid
from typing import Any, Optional, Union


class ID:
    """Immutable GUID-backed identifier compared by value."""

    __slots__ = ("_guid",)

    def __init__(self, value: Union[str, uuid.UUID, "ID"]):
        if isinstance(value, ID):
            guid = value.guid
        elif isinstance(value, uuid.UUID):
            guid = value
        elif isinstance(value, str):
            guid = uuid.UUID(value.strip().strip("{}"))
        else:
            raise TypeError(f"Cannot create ID from {type(value).__name__}")
        object.__setattr__(self, "_guid", guid)

    def __setattr__(self, name, value):
        raise AttributeError("ID is immutable")

    @property
    def guid(self) -> uuid.UUID:
        return self._guid

    @property
    def is_null(self) -> bool:
        return self._guid.int == 0

    @classmethod
    def parse(cls, value: str) -> "ID":
        """Parse a GUID string. Raises ValueError when malformed."""
        return cls(value)

    @classmethod
    def try_parse(cls, value: Any) -> Optional["ID"]:
        if isinstance(value, (ID, uuid.UUID)):
            return cls(value)
        if not isinstance(value, str) or not value.strip():
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @staticmethod
    def is_id(value: Any) -> bool:
        return ID.try_parse(value) is not None

    @staticmethod
    def is_null_or_empty(value: Any) -> bool:
        """True for None, blank strings, unparseable strings and the null ID."""
        parsed = ID.try_parse(value)
        return parsed is None or parsed.is_null

    @classmethod
    def new_id(cls) -> "ID":
        return cls(uuid.uuid4())

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ID):
            return self._guid == other._guid
        if isinstance(other, str):
            parsed = ID.try_parse(other)
            return parsed is not None and parsed._guid == self._guid
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._guid)

    def __str__(self) -> str:
        return "{" + str(self._guid).upper() + "}"

    def __repr__(self) -> str:
        return f"ID('{self}')"


ID.NULL = ID(uuid.UUID(int=0))


def same_id(left: Optional[str], right: Optional[str]) -> bool:
    """
    Compare two identifier strings.

    GUIDs compare by value regardless of braces and case; anything else
    compares case-insensitively.
    """
    if left is None or right is None:
        return left is right
    left_id, right_id = ID.try_parse(left), ID.try_parse(right)
    if left_id is not None and right_id is not None:
        return left_id == right_id
    return left.strip().lower() == right.strip().lower()
