"""Error types surfaced to the desktop host.

Every failure crosses the host boundary as a plain message string, so each
exception carries its user-facing text in ``message``. Absence of a stored
credential is never an error and has no type here.
"""

from __future__ import annotations


class KenDesktopError(Exception):
    """Base class for all failures reported to the host."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(KenDesktopError):
    """Missing or invalid caller input."""


class StoreAccessError(KenDesktopError):
    """The credential store could not be opened."""


class StoreOperationError(KenDesktopError):
    """A credential read, write or delete failed for a reason other than absence."""


class HomeDirectoryError(KenDesktopError):
    """The home directory could not be resolved from the environment."""


class FilesystemError(KenDesktopError):
    """Workspace directory creation failed."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class WorkspacePermissionError(FilesystemError):
    """Directory creation was refused by the OS; message includes remediation."""


class CommandError(KenDesktopError):
    """Raised by the command layer; ``message`` is what the host shows."""
