"""
Host context.

Holds what the host request would otherwise provide: the context item, the
current device, the current user, page designer state and session values.
The current device follows the execution context, so a device switch in one
thread or task is not seen by another.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from phsettings.core.config import get_config
from phsettings.core.logging import get_logger
from phsettings.security import ANONYMOUS, User

if TYPE_CHECKING:
    from phsettings.data.items import Item

_device_id: ContextVar[Optional[str]] = ContextVar("phsettings_device_id", default=None)


@dataclass
class PageDesignerState:
    """Page designer session flags."""
    is_designing: bool = False
    handle: Optional[str] = None


class SiteContext:
    """
    Mutable per-request context.

    Usage:
        context.item = home
        context.page_designer.is_designing = True
        with context.device_switcher("{...}"):
            ...
    """

    def __init__(self):
        self.logger = get_logger("phsettings.context")
        self.reset()

    def reset(self):
        """Restore the empty request state."""
        self.item: Optional["Item"] = None
        self.device_id = None
        self.user: User = ANONYMOUS
        self.page_designer = PageDesignerState()
        self.session: Dict[str, Any] = {}
        self.is_unit_testing = False

    @property
    def device_id(self) -> Optional[str]:
        return _device_id.get()

    @device_id.setter
    def device_id(self, value: Optional[str]):
        _device_id.set(value)

    def get_session_string(self, key: Optional[str]) -> Optional[str]:
        if not key:
            return None
        value = self.session.get(key)
        return None if value is None else str(value)

    @property
    def effective_device_id(self) -> Optional[str]:
        """Current device, or the unit-testing device when unit testing."""
        if self.is_unit_testing:
            return get_config().unit_testing_device_id
        return self.device_id

    @contextmanager
    def device_switcher(self, device_id: Optional[str]) -> Iterator[None]:
        """Make device_id the current device for the duration of the block."""
        token = _device_id.set(device_id)
        self.logger.trace("Device switched", device=device_id, previous=token.old_value)
        try:
            yield
        finally:
            _device_id.reset(token)


context = SiteContext()
