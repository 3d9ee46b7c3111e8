"""
phsettings - Placeholder settings resolution for page layouts

Resolves which placeholder settings items apply to a placeholder of a page
layout and which renderings the page editor may insert into it.

Usage:
    from phsettings import Database, GetAllowedRenderings, GetPlaceholderRenderingsArgs

    args = GetPlaceholderRenderingsArgs(
        placeholder_key="page/main",
        content_database=database,
        layout_definition=home["__Renderings"],
        device_id="{FE5D7FDF-89C0-4D99-9AA3-B5FBD009C9F3}",
    )
    GetAllowedRenderings().process(args)
    print(args.placeholder_renderings, args.options.show_tree)
"""

__description__ = "Placeholder settings resolution for page layouts"
__version__ = "1.0.0"

from phsettings.core.config import Config
from phsettings.core.logging import get_logger, log
from phsettings.core.errors import PhSettingsError, ArgumentNullError, LayoutParseError, ConfigError
from phsettings.core.cache import PlaceholderCache, get_placeholder_cache, clear_cache
from phsettings.data.ids import ID
from phsettings.data.items import Item, distinct_items
from phsettings.data.database import Database
from phsettings.security import User, security_disabler, is_security_disabled
from phsettings.context import context
from phsettings.layouts.definition import LayoutDefinition, DeviceDefinition, PlaceholderDefinition, LayoutField
from phsettings.pipelines.args import GetPlaceholderRenderingsArgs, RenderingOptions
from phsettings.pipelines.resolution import (
    Matches,
    NoDefinitionsForDevice,
    resolve_definitions,
    get_placeholder_definition_list,
)
from phsettings.pipelines.get_allowed_renderings import GetAllowedRenderings

__all__ = [
    "Config",
    "get_logger",
    "log",
    "PhSettingsError",
    "ArgumentNullError",
    "LayoutParseError",
    "ConfigError",
    "PlaceholderCache",
    "get_placeholder_cache",
    "clear_cache",
    "ID",
    "Item",
    "distinct_items",
    "Database",
    "User",
    "security_disabler",
    "is_security_disabled",
    "context",
    "LayoutDefinition",
    "DeviceDefinition",
    "PlaceholderDefinition",
    "LayoutField",
    "GetPlaceholderRenderingsArgs",
    "RenderingOptions",
    "Matches",
    "NoDefinitionsForDevice",
    "resolve_definitions",
    "get_placeholder_definition_list",
    "GetAllowedRenderings",
]
