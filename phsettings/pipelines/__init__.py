"""
phsettings Pipelines Module

Contains placeholder resolution and the allowed renderings processor.
"""

from phsettings.pipelines.args import GetPlaceholderRenderingsArgs, RenderingOptions
from phsettings.pipelines.resolution import (
    Matches,
    NoDefinitionsForDevice,
    resolve_definitions,
    get_placeholder_definition_list,
)
from phsettings.pipelines.get_allowed_renderings import GetAllowedRenderings

__all__ = [
    "GetPlaceholderRenderingsArgs",
    "RenderingOptions",
    "Matches",
    "NoDefinitionsForDevice",
    "resolve_definitions",
    "get_placeholder_definition_list",
    "GetAllowedRenderings",
]
