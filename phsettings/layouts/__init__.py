"""
phsettings Layouts Module

Contains the layout definition parser.
"""

from phsettings.layouts.definition import (
    LayoutDefinition,
    DeviceDefinition,
    PlaceholderDefinition,
    LayoutField,
)

__all__ = ["LayoutDefinition", "DeviceDefinition", "PlaceholderDefinition", "LayoutField"]
