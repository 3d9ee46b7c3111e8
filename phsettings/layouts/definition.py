"""
Layout Definition Parser

Parses the layout XML stored on content items:

    <r>
      <d id="{device}" l="{layout}">
        <r id="{rendering}" ph="main" uid="{...}" />
        <p key="main" md="{placeholder settings}" uid="{...}" />
      </d>
    </r>

Only devices and placeholder (<p>) records are kept; rendering records are
ignored.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from bs4 import BeautifulSoup, Tag, XMLParsedAsHTMLWarning

from phsettings.core.config import get_config
from phsettings.core.errors import LayoutParseError, SourceLocation
from phsettings.core.logging import get_logger
from phsettings.data.ids import same_id
from phsettings.utils import Assert

if TYPE_CHECKING:
    from phsettings.data.items import Item

logger = get_logger("phsettings.layout")


@dataclass(frozen=True)
class PlaceholderDefinition:
    """
    Placeholder record of one device.

    Attributes:
        key: Placeholder key as authored, e.g. "main" or "page/main"
        metadata_item_id: Placeholder settings item reference (md attribute)
        unique_id: Host-assigned uid attribute
    """
    key: str
    metadata_item_id: Optional[str] = None
    unique_id: Optional[str] = None


@dataclass(frozen=True)
class DeviceDefinition:
    """Layout of one device with its placeholder records in document order."""
    id: str
    layout: Optional[str] = None
    placeholders: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class LayoutDefinition:
    """Parsed layout field: device records in document order."""
    devices: tuple = field(default_factory=tuple)

    @classmethod
    def parse(cls, xml: str) -> "LayoutDefinition":
        """
        Parse a layout definition.

        Args:
            xml: Raw layout field value

        Returns:
            LayoutDefinition; empty for blank input

        Raises:
            LayoutParseError: If non-blank input has no <r> root element
        """
        Assert.argument_not_null(xml, "xml")
        if not xml.strip():
            return cls()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", XMLParsedAsHTMLWarning)
            soup = BeautifulSoup(xml, "html.parser")
        root = soup.find("r")
        if root is None:
            first = soup.find(True)
            location = None
            if first is not None and first.sourceline is not None:
                location = SourceLocation(first.sourceline, first.sourcepos + 1, "layout")
            raise LayoutParseError(
                "Layout definition has no <r> root element",
                location=location,
                hint="Layout fields are stored as <r><d id=... l=...>...</d></r>",
            )
        devices = tuple(
            _parse_device(device) for device in root.find_all("d", recursive=False)
        )
        logger.layout("Parsed layout definition", devices=len(devices))
        return cls(devices)

    def get_device(self, device_id: str) -> Optional[DeviceDefinition]:
        """First device record whose id matches device_id, or None."""
        Assert.argument_not_null(device_id, "device_id")
        for device in self.devices:
            if same_id(device.id, device_id):
                return device
        return None


def _parse_device(node: Tag) -> DeviceDefinition:
    placeholders = tuple(
        PlaceholderDefinition(
            key=p.get("key", ""),
            metadata_item_id=p.get("md") or None,
            unique_id=p.get("uid") or None,
        )
        for p in node.find_all("p", recursive=False)
    )
    device = DeviceDefinition(
        id=node.get("id", ""),
        layout=node.get("l") or None,
        placeholders=placeholders,
    )
    logger.layout("Parsed device", device=device.id, placeholders=len(placeholders))
    return device


class LayoutField:
    """Layout field of a content item."""

    def __init__(self, item: "Item"):
        Assert.argument_not_null(item, "item")
        self.item = item

    @property
    def value(self) -> str:
        return self.item[get_config().layout_field]

    def parse(self) -> LayoutDefinition:
        return LayoutDefinition.parse(self.value)
