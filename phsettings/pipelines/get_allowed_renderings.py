"""
Allowed renderings processor.

Collects the renderings that may be inserted into a placeholder from the
placeholder settings items that apply to it. Settings items are found
through the placeholder records of the page layout for the edited device,
or through the legacy placeholder cache when the device has no such records.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from phsettings.context import context
from phsettings.core.cache import get_placeholder_cache
from phsettings.core.config import Config, get_config
from phsettings.core.logging import get_logger
from phsettings.data.ids import ID
from phsettings.data.items import Item, distinct_items, merge_distinct
from phsettings.layouts.definition import LayoutField
from phsettings.pipelines.args import GetPlaceholderRenderingsArgs
from phsettings.pipelines.resolution import (
    NoDefinitionsForDevice,
    get_placeholder_definition_list,
)
from phsettings.security import security_disabler
from phsettings.utils import Assert, ListString, get_last_part

if TYPE_CHECKING:
    from phsettings.data.database import Database


class GetAllowedRenderings:
    """
    Pipeline processor for the renderings allowed in a placeholder.

    Usage:
        args = GetPlaceholderRenderingsArgs("page/main", database, layout_xml, device_id)
        GetAllowedRenderings().process(args)
        args.placeholder_renderings
    """

    def __init__(self, config: Config = None):
        self._config = config
        self.logger = get_logger("phsettings.pipeline")

    @property
    def config(self) -> Config:
        """Lazy-load config if not provided."""
        if self._config is None:
            self._config = get_config()
        return self._config

    def process(self, args: GetPlaceholderRenderingsArgs):
        """
        Pipeline entry point.

        Args:
            args: Pipeline arguments; renderings and flags are added to them
        """
        Assert.argument_not_null(args, "args")
        Assert.argument_not_null(args.placeholder_key, "args.placeholder_key")
        Assert.argument_not_null(args.content_database, "args.content_database")

        if ID.is_null_or_empty(args.device_id):
            # Without a device the host lookup decides on a single item
            item = self.get_placeholder_item(
                args.placeholder_key, args.content_database, args.layout_definition
            )
            placeholder_items = [item] if item is not None else []
        else:
            with context.device_switcher(args.device_id):
                placeholder_items = self.get_placeholder_items(
                    args.placeholder_key,
                    args.content_database,
                    args.layout_definition or None,
                )

        allowed_renderings: List[Item] = []
        if placeholder_items:
            allowed_controls_specified = False
            args.has_placeholder_settings = True
            for placeholder_item in placeholder_items:
                renderings = self.get_allowed_renderings_by_placeholder(placeholder_item)
                if renderings:
                    allowed_controls_specified = True
                    allowed_renderings.extend(renderings)

            # An allow-list replaces the full rendering tree in the picker
            if allowed_controls_specified:
                args.options.show_tree = False

        if allowed_renderings:
            if args.placeholder_renderings is None:
                args.placeholder_renderings = []
            appended = merge_distinct(
                args.placeholder_renderings, distinct_items(allowed_renderings)
            )
            self.logger.resolve(
                "Allowed renderings collected",
                key=args.placeholder_key,
                added=len(appended),
                total=len(args.placeholder_renderings),
            )

    def get_allowed_renderings_by_placeholder(self, placeholder_item: Item) -> Optional[List[Item]]:
        """
        Get the renderings listed in the Allowed Controls field of a settings item.

        Args:
            placeholder_item: Placeholder settings item

        Returns:
            Resolved renderings in field order, or None when the field is
            empty (no restriction)
        """
        Assert.argument_not_null(placeholder_item, "placeholder_item")
        allowed = ListString(
            placeholder_item[self.config.allowed_controls_field],
            self.config.list_separator,
        )
        if allowed.count <= 0:
            return None

        renderings = []
        for path in allowed:
            rendering = placeholder_item.database.get_item(path)
            if rendering is None:
                self.logger.debug(
                    "Skipping unresolvable allowed control",
                    settings=placeholder_item.path,
                    reference=path,
                )
                continue
            renderings.append(rendering)
        return renderings

    def get_effective_layout_definition(self) -> Optional[str]:
        """
        Get the layout definition of the page being edited.

        Prefers the pending layout of an active page designer session over
        the layout field of the context item.
        """
        layout_definition = None
        if context.page_designer.is_designing:
            handle = context.page_designer.handle
            if handle:
                layout_definition = context.get_session_string(handle)

        item = context.item
        if item is not None and not layout_definition:
            layout_definition = LayoutField(item).value

        return layout_definition or None

    def get_placeholder_items(
            self,
            placeholder_key: str,
            database: "Database",
            layout_definition: Optional[str] = None,
    ) -> Optional[List[Item]]:
        """
        Get the placeholder settings items that apply to a placeholder key.

        Args:
            placeholder_key: The placeholder key
            database: Database the settings items are read from
            layout_definition: Raw layout XML; the effective layout of the
                               context is used when omitted

        Returns:
            Settings items without repeats, or None when no layout definition
            is available
        """
        Assert.argument_not_null(placeholder_key, "placeholder_key")
        Assert.argument_not_null(database, "database")
        if layout_definition is None:
            layout_definition = self.get_effective_layout_definition()
            if layout_definition is None:
                self.logger.resolve("No layout definition available", key=placeholder_key)
                return None

        placeholder_key = placeholder_key.lower()
        lookup = get_placeholder_definition_list(layout_definition, placeholder_key)

        if isinstance(lookup, NoDefinitionsForDevice):
            item = self._get_legacy_placeholder_item(placeholder_key, database)
            return [item] if item is not None else []

        placeholder_items = []
        for placeholder_definition in lookup:
            metadata_item_id = placeholder_definition.metadata_item_id
            if not metadata_item_id:
                continue
            item = self._get_metadata_item(database, metadata_item_id)
            if item is not None:
                placeholder_items.append(item)
        return distinct_items(placeholder_items)

    def get_placeholder_item(
            self,
            placeholder_key: str,
            database: "Database",
            layout_definition: Optional[str] = None,
    ) -> Optional[Item]:
        """
        Get a single placeholder settings item for a key.

        Uses the first matching placeholder record of the context device,
        then the legacy placeholder cache.
        """
        Assert.argument_not_null(placeholder_key, "placeholder_key")
        Assert.argument_not_null(database, "database")
        placeholder_key = placeholder_key.lower()
        if layout_definition is None:
            layout_definition = self.get_effective_layout_definition()

        device_id = context.effective_device_id
        if layout_definition and device_id:
            lookup = get_placeholder_definition_list(
                layout_definition, placeholder_key, device_id
            )
            if not isinstance(lookup, NoDefinitionsForDevice):
                for placeholder_definition in lookup:
                    if not placeholder_definition.metadata_item_id:
                        continue
                    item = self._get_metadata_item(
                        database, placeholder_definition.metadata_item_id
                    )
                    if item is not None:
                        return item

        return self._get_legacy_placeholder_item(placeholder_key, database)

    def _get_metadata_item(self, database: "Database", metadata_item_id: str) -> Optional[Item]:
        # Settings items must be readable whatever the current user may see
        with security_disabler():
            item = database.get_item(metadata_item_id)
        if item is None:
            self.logger.debug("Placeholder settings item not found", md=metadata_item_id)
        return item

    def _get_legacy_placeholder_item(self, placeholder_key: str, database: "Database") -> Optional[Item]:
        cache = get_placeholder_cache(database)
        item = cache[placeholder_key]
        if item is None:
            last_part = get_last_part(placeholder_key, "/")
            if last_part is not None:
                item = cache[last_part]
        self.logger.resolve(
            "Legacy placeholder cache lookup",
            key=placeholder_key,
            found=item is not None,
        )
        return item
