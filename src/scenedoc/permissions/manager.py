"""Write-permission checks for reusing a file handle.

Before a scene is saved in place, the handle from the previous save
must still be writable.  Permission is re-evaluated on every call and
never cached:

1. Query the current read-write permission.  If it is granted, stop.
2. Otherwise request it, which may prompt the user.
3. Anything other than a grant, including an error raised by the
   platform, counts as a refusal.

``verify_permission`` collapses the outcome to a boolean, so a denial
and an API error look the same to the caller.  ``check_permission``
keeps the three cases apart for callers that need to tell them apart.

Usage
-----
::

    from scenedoc.permissions import FileHandlePermissionManager

    manager = FileHandlePermissionManager()
    if not await manager.verify_permission(handle):
        raise AbortError()
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto

from scenedoc.fs.base import FileHandle, PermissionMode, PermissionState

logger = logging.getLogger(__name__)


class PermissionStatus(Enum):
    """Outcome of a permission check."""

    GRANTED = auto()
    DENIED = auto()
    ERROR = auto()


@dataclass(frozen=True)
class PermissionOutcome:
    """Result of ``FileHandlePermissionManager.check_permission``.

    Parameters
    ----------
    status:
        Whether permission was granted, refused, or could not be checked.
    prompted:
        ``True`` if a permission request was issued, which may have
        shown a prompt to the user.
    error:
        The exception raised by the platform when ``status`` is
        ``ERROR``.
    """

    status: PermissionStatus
    prompted: bool = False
    error: BaseException | None = field(default=None, compare=False)

    @property
    def granted(self) -> bool:
        """Return True if write access is currently available."""
        return self.status == PermissionStatus.GRANTED


class FileHandlePermissionManager:
    """Confirms write permission on a file handle before it is reused.

    The manager holds no per-handle state; every call asks the handle
    again.

    Parameters
    ----------
    mode:
        Access mode to check.  Saving needs ``READWRITE``.
    """

    def __init__(self, mode: PermissionMode = PermissionMode.READWRITE) -> None:
        self._mode = mode

    async def check_permission(self, handle: FileHandle) -> PermissionOutcome:
        """Query, then request if needed, and report what happened."""
        prompted = False
        try:
            if await handle.query_permission(self._mode) == PermissionState.GRANTED:
                return PermissionOutcome(PermissionStatus.GRANTED)
            prompted = True
            state = await handle.request_permission(self._mode)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Permission check failed for %r", handle)
            return PermissionOutcome(PermissionStatus.ERROR, prompted=prompted, error=exc)

        if state == PermissionState.GRANTED:
            return PermissionOutcome(PermissionStatus.GRANTED, prompted=True)
        logger.debug("Write permission refused for %r (%s)", handle, state.value)
        return PermissionOutcome(PermissionStatus.DENIED, prompted=True)

    async def verify_permission(self, handle: FileHandle) -> bool:
        """Return True if write permission is granted, prompting if needed.

        Never raises for platform errors; they are logged and reported
        as ``False``.
        """
        outcome = await self.check_permission(handle)
        return outcome.granted
