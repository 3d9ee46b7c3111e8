"""
Legacy placeholder cache.
Maps lowercase placeholder keys to placeholder settings items, one cache per
database. Used when a layout carries no placeholder records for the device.
"""
from __future__ import annotations
from typing import Dict, Any, Optional, TYPE_CHECKING
from phsettings.core.config import get_config
from phsettings.core.logging import get_logger
from phsettings.security import security_disabler

if TYPE_CHECKING:
    from phsettings.data.database import Database
    from phsettings.data.items import Item


class PlaceholderCache:
    """
    Cache of placeholder settings items keyed by placeholder key.
    Built lazily by scanning the placeholder settings root of the database
    for items with a non-empty key field. The first item found for a key
    wins.
    Usage:
        cache = get_placeholder_cache(database)
        item = cache["main"]
        if item is None:
            ...
    """

    def __init__(self, database: "Database"):
        """
        Initialize the placeholder cache.
        Args:
            database: Database whose placeholder settings are cached
        """
        self.database = database
        self.logger = get_logger("phsettings.cache")
        self._entries: Optional[Dict[str, "Item"]] = None

    @property
    def loaded(self) -> bool:
        return self._entries is not None

    def reload(self):
        """Rebuild the cache from the database."""
        config = get_config()
        entries: Dict[str, "Item"] = {}
        with security_disabler():
            items = self.database.select_items(config.placeholder_settings_root)
        for item in items:
            key = item[config.placeholder_key_field].strip().lower()
            if key and key not in entries:
                entries[key] = item
        self._entries = entries
        self.logger.debug(
            "Placeholder cache loaded", database=self.database.name, keys=len(entries)
        )

    def get(self, key: str) -> Optional["Item"]:
        """
        Get the settings item for a placeholder key.
        Args:
            key: Placeholder key, compared lowercase
        Returns:
            Cached item, or None if no settings item carries the key
        """
        if self._entries is None:
            self.reload()
        item = self._entries.get(key.lower())
        if item is None:
            self.logger.trace(f"Cache miss: {key}")
        else:
            self.logger.trace(f"Cache hit: {key}")
        return item

    def __getitem__(self, key: str) -> Optional["Item"]:
        return self.get(key)

    def set(self, key: str, item: "Item"):
        """Register an item under a key, replacing any previous entry."""
        if self._entries is None:
            self.reload()
        self._entries[key.lower()] = item

    def remove(self, key: str):
        if self._entries is not None:
            self._entries.pop(key.lower(), None)

    def clear(self):
        """Drop all entries; the next read reloads from the database."""
        self._entries = None
        self.logger.debug("Cache cleared", database=self.database.name)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        return {
            "database": self.database.name,
            "loaded": self.loaded,
            "key_count": len(self._entries or {}),
        }


_caches: Dict[str, PlaceholderCache] = {}


def get_placeholder_cache(database: "Database") -> PlaceholderCache:
    """
    Get the placeholder cache for a database.
    Args:
        database: Database instance; caches are keyed by its name
    Returns:
        PlaceholderCache for that database
    """
    cache = _caches.get(database.name)
    if cache is None or cache.database is not database:
        cache = PlaceholderCache(database)
        _caches[database.name] = cache
    return cache


def clear_cache():
    """Drop all placeholder caches."""
    _caches.clear()
