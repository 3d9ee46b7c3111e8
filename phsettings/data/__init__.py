"""
phsettings Data Module

Contains item identifiers, the item model and the in-memory item database.
"""

from phsettings.data.ids import ID
from phsettings.data.items import Item, distinct_items, merge_distinct
from phsettings.data.database import Database

__all__ = ["ID", "Item", "distinct_items", "merge_distinct", "Database"]
