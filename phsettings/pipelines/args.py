"""
Pipeline arguments for placeholder rendering lookups.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from phsettings.data.database import Database
    from phsettings.data.items import Item


@dataclass
class RenderingOptions:
    """UI options of the rendering picker."""
    show_tree: bool = True


@dataclass
class GetPlaceholderRenderingsArgs:
    """
    Arguments passed along the placeholder renderings pipeline.

    Processors append to placeholder_renderings and set the flags; they do
    not replace what earlier processors collected.

    Attributes:
        placeholder_key: Key of the placeholder being edited
        content_database: Database the settings and renderings are read from
        layout_definition: Raw layout XML of the page, if the caller has it
        device_id: Device being edited; empty means the host default lookup
        placeholder_renderings: Renderings allowed in the placeholder
        has_placeholder_settings: Whether settings items apply to the placeholder
        options: Rendering picker options
    """
    placeholder_key: str
    content_database: "Database"
    layout_definition: Optional[str] = None
    device_id: Optional[str] = None
    placeholder_renderings: Optional[List["Item"]] = None
    has_placeholder_settings: bool = False
    options: RenderingOptions = field(default_factory=RenderingOptions)
