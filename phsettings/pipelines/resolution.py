"""
Placeholder definition resolution.

Selects the placeholder records of one device that apply to a placeholder
key. The outcome tells apart a device without any placeholder records, which
sends callers to the legacy cache, from a device whose records simply do not
match the key.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from phsettings.context import context
from phsettings.core.logging import get_logger
from phsettings.layouts.definition import LayoutDefinition, PlaceholderDefinition
from phsettings.utils import Assert, get_last_part

logger = get_logger("phsettings.pipeline")


@dataclass(frozen=True)
class NoDefinitionsForDevice:
    """The device is missing from the layout or has no placeholder records."""
    device_id: str


@dataclass(frozen=True)
class Matches:
    """Placeholder records selected for the key, in layout order."""
    definitions: Tuple[PlaceholderDefinition, ...] = ()

    def __iter__(self):
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)


DefinitionLookup = Union[NoDefinitionsForDevice, Matches]


def resolve_definitions(
        layout: LayoutDefinition,
        device_id: str,
        placeholder_key: str,
) -> DefinitionLookup:
    """
    Find the placeholder records of a device that apply to a key.

    A record applies when its key equals the whole placeholder key or the
    part after the last '/', ignoring case. Repeated keys are all returned.

    Args:
        layout: Parsed layout definition
        device_id: Device whose records are searched
        placeholder_key: Requested placeholder key, e.g. "page/main"

    Returns:
        NoDefinitionsForDevice, or Matches (possibly empty)
    """
    Assert.argument_not_null(layout, "layout")
    Assert.argument_not_null(placeholder_key, "placeholder_key")
    Assert.argument_not_null(device_id, "device_id")

    device = layout.get_device(device_id)
    if device is None or not device.placeholders:
        logger.resolve("No placeholder definitions for device", device=device_id)
        return NoDefinitionsForDevice(device_id)

    last_part = get_last_part(placeholder_key, "/", placeholder_key)
    wanted = {last_part.casefold(), placeholder_key.casefold()}
    selected = tuple(p for p in device.placeholders if p.key.casefold() in wanted)
    logger.resolve(
        "Placeholder definitions matched",
        key=placeholder_key,
        device=device_id,
        matched=len(selected),
        scanned=len(device.placeholders),
    )
    return Matches(selected)


def get_placeholder_definition_list(
        definition: Union[str, LayoutDefinition],
        placeholder_key: str,
        device_id: Optional[str] = None,
) -> DefinitionLookup:
    """
    Resolve placeholder records from a raw or parsed layout definition.

    Without device_id the context device is used, or the unit-testing device
    when the context is in unit-testing mode.
    """
    Assert.argument_not_null(definition, "definition")
    Assert.argument_not_null(placeholder_key, "placeholder_key")
    if isinstance(definition, str):
        definition = LayoutDefinition.parse(definition)
    if device_id is None:
        device_id = context.effective_device_id
        Assert.is_not_null(device_id, "context.device_id")
    return resolve_definitions(definition, device_id, placeholder_key)
