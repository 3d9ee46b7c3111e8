"""
In-memory item database.

Stores item records and answers lookups by ID or by path. Reads honour the
security model: an item with read roles is invisible to a context user
without one of them unless security is disabled.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from phsettings.core.logging import get_logger
from phsettings.data.ids import ID
from phsettings.data.items import Item
from phsettings.security import can_read
from phsettings.utils import Assert


@dataclass
class ItemRecord:
    """Stored state of one item."""
    id: ID
    name: str
    path: str
    fields: Dict[str, str] = field(default_factory=dict)
    read_roles: FrozenSet[str] = field(default_factory=frozenset)


def _normalize_path(path: str) -> str:
    return "/" + path.strip().strip("/").lower()


class Database:
    """
    Named item store.

    Usage:
        db = Database("master")
        rendering = db.add_item("/sitecore/layout/Renderings/Hero")
        db.get_item(rendering.id)
        db.get_item("/sitecore/layout/renderings/hero")
    """

    def __init__(self, name: str):
        Assert.argument_not_null(name, "name")
        self.name = name
        self.logger = get_logger("phsettings.database")
        self._records: Dict[ID, ItemRecord] = {}
        self._paths: Dict[str, ID] = {}

    def add_item(
            self,
            path: str,
            fields: Optional[Mapping[str, str]] = None,
            item_id: Union[ID, str, None] = None,
            read_roles: Optional[Iterable[str]] = None,
    ) -> Item:
        """
        Store an item and return a view of it.

        Adding an existing path or ID replaces the earlier record.
        """
        Assert.argument_not_null(path, "path")
        record_id = ID(item_id) if item_id is not None else ID.new_id()
        path = "/" + path.strip().strip("/")
        previous = self._records.pop(record_id, None)
        if previous is not None:
            self._paths.pop(_normalize_path(previous.path), None)
        replaced = self._paths.pop(_normalize_path(path), None)
        if replaced is not None:
            self._records.pop(replaced, None)
        record = ItemRecord(
            id=record_id,
            name=path.rsplit("/", 1)[-1],
            path=path,
            fields=dict(fields or {}),
            read_roles=frozenset(r.lower() for r in (read_roles or ())),
        )
        self._records[record_id] = record
        self._paths[_normalize_path(path)] = record_id
        self.logger.trace("Item added", path=path, id=str(record_id))
        return self._to_item(record)

    def _to_item(self, record: ItemRecord) -> Item:
        return Item(record.id, record.name, record.path, self, record.fields)

    def _readable(self, record: ItemRecord) -> bool:
        from phsettings.context import context
        return can_read(record.read_roles, context.user)

    def _find_record(self, identifier: Union[ID, str]) -> Optional[ItemRecord]:
        item_id = ID.try_parse(identifier)
        if item_id is not None:
            return self._records.get(item_id)
        if isinstance(identifier, str) and identifier.strip().startswith("/"):
            record_id = self._paths.get(_normalize_path(identifier))
            if record_id is not None:
                return self._records.get(record_id)
        return None

    def get_item(self, identifier: Union[ID, str]) -> Optional[Item]:
        """
        Get an item by ID, GUID string or path.

        Returns:
            A new Item, or None when the item does not exist or the context
            user may not read it
        """
        Assert.argument_not_null(identifier, "identifier")
        record = self._find_record(identifier)
        if record is None:
            self.logger.lookup("Item not found", database=self.name, identifier=str(identifier))
            return None
        if not self._readable(record):
            self.logger.lookup("Item not readable", database=self.name, identifier=str(identifier))
            return None
        return self._to_item(record)

    def select_items(self, root_path: str) -> List[Item]:
        """Readable descendants of root_path in insertion order."""
        prefix = _normalize_path(root_path).rstrip("/") + "/"
        return [
            self._to_item(record)
            for record in self._records.values()
            if _normalize_path(record.path).startswith(prefix) and self._readable(record)
        ]

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"Database({self.name!r})"
