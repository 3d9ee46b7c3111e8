"""
Item model.

Every lookup hands out a new Item object, so two Items may refer to the same
stored entity. Equality and hashing are by ID for that reason.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional

from phsettings.data.ids import ID

if TYPE_CHECKING:
    from phsettings.data.database import Database


class Item:
    """
    A content item read from a Database.

    Field names are case-insensitive and missing fields read as "".

    Usage:
        item = database.get_item("/sitecore/layout/Placeholder Settings/main")
        raw = item["Allowed Controls"]
    """

    def __init__(
            self,
            item_id: ID,
            name: str,
            path: str,
            database: "Database",
            fields: Optional[Mapping[str, str]] = None,
    ):
        self.id = item_id
        self.name = name
        self.path = path
        self.database = database
        self._fields: Dict[str, str] = {
            k.lower(): v for k, v in (fields or {}).items()
        }

    def __getitem__(self, field_name: str) -> str:
        return self._fields.get(field_name.lower(), "") or ""

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"Item({self.path!r}, id={self.id})"


def distinct_items(items: Iterable[Optional[Item]]) -> List[Item]:
    """Drop None and repeated IDs, keeping the first occurrence in order."""
    seen = set()
    result = []
    for item in items:
        if item is None or item.id in seen:
            continue
        seen.add(item.id)
        result.append(item)
    return result


def merge_distinct(existing: List[Item], additions: Iterable[Item]) -> List[Item]:
    """
    Append additions to existing in place, skipping IDs already present.

    Returns the items that were appended.
    """
    seen = {item.id for item in existing if item is not None}
    appended = []
    for item in additions:
        if item is None or item.id in seen:
            continue
        seen.add(item.id)
        existing.append(item)
        appended.append(item)
    return appended
