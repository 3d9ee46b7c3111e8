"""
Security model for item reads.

Items may carry a set of read roles. A user may read such an item when they
hold one of the roles or are an administrator. Inside security_disabler()
every item is readable; the elevation ends as soon as the block exits.
"""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Iterator, Optional

from phsettings.core.logging import get_logger

logger = get_logger("phsettings.security")

_security_disabled: ContextVar[bool] = ContextVar("phsettings_security_disabled", default=False)


@dataclass(frozen=True)
class User:
    """An authenticated or anonymous user of the host."""
    name: str
    roles: FrozenSet[str] = field(default_factory=frozenset)
    is_administrator: bool = False

    @classmethod
    def with_roles(cls, name: str, roles: Iterable[str], is_administrator: bool = False) -> "User":
        return cls(name, frozenset(r.lower() for r in roles), is_administrator)

    def is_in_role(self, role: str) -> bool:
        return role.lower() in self.roles


ANONYMOUS = User("extranet\\Anonymous")


def is_security_disabled() -> bool:
    return _security_disabled.get()


@contextmanager
def security_disabler() -> Iterator[None]:
    """
    Disable read authorization for the duration of the block.

    The flag lives in the current execution context, so other threads and
    tasks keep their own authorization. Nested use is allowed; the previous
    state is restored on every exit path.
    """
    token = _security_disabled.set(True)
    logger.trace("Security disabled")
    try:
        yield
    finally:
        _security_disabled.reset(token)
        logger.trace("Security restored", disabled=_security_disabled.get())


def can_read(read_roles: Optional[FrozenSet[str]], user: Optional[User]) -> bool:
    """Check whether user may read an item guarded by read_roles."""
    if _security_disabled.get() or not read_roles:
        return True
    if user is None:
        return False
    if user.is_administrator:
        return True
    return any(user.is_in_role(role) for role in read_roles)
