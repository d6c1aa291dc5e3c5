"""Per-thread workspace directories under ~/Executive Assistant/Ken.

Each conversation thread gets its own directory named after its normalized
thread id. Provisioning is idempotent: the first call creates the directory
and reports ``created=True``; later calls reuse it.

Key class: WorkspaceProvisioner. Key helper: normalize_thread_id().
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from ..errors import (
    FilesystemError,
    HomeDirectoryError,
    ValidationError,
    WorkspacePermissionError,
)
from ..settings import DEFAULT_HOME_ENV, DEFAULT_ROOT_SEGMENTS

logger = logging.getLogger(__name__)

_THREAD_ID_RE = re.compile(r"^[a-z0-9._-]+$")

# Names that would point at the root itself or its parent
_RESERVED_THREAD_IDS = frozenset({".", ".."})


def normalize_thread_id(raw: str) -> str:
    """Trim and lowercase *raw*, then check it is a safe directory name.

    Idempotent: a normalized id normalizes to itself.

    Raises:
        ValidationError: If the id is empty or has characters outside
            ``a-z 0-9 . _ -``.
    """
    normalized = raw.strip().lower()
    if not normalized:
        raise ValidationError("Thread ID is required.")
    if not _THREAD_ID_RE.match(normalized) or normalized in _RESERVED_THREAD_IDS:
        raise ValidationError(
            "Thread ID can only contain lowercase letters, numbers, '.', '_' or '-'."
        )
    return normalized


@dataclass(frozen=True)
class ThreadWorkspace:
    """Result of WorkspaceProvisioner.ensure_thread_workspace()."""

    thread_id: str
    root_path: str
    thread_path: str
    created: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "threadId": self.thread_id,
            "rootPath": self.root_path,
            "threadPath": self.thread_path,
            "created": self.created,
        }


class Filesystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def create_dir_all(self, path: Path) -> None: ...


class LocalFilesystem:
    """The real filesystem."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def create_dir_all(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)


class WorkspaceProvisioner:
    """Creates thread directories beneath ``$HOME/<root_segments...>``.

    The home directory is read from *environ* (default ``os.environ``) on
    every call; there is no fallback when it is missing.
    """

    def __init__(
        self,
        filesystem: Filesystem | None = None,
        environ: Mapping[str, str] | None = None,
        home_env: str = DEFAULT_HOME_ENV,
        root_segments: tuple[str, ...] = DEFAULT_ROOT_SEGMENTS,
    ) -> None:
        self.filesystem = filesystem if filesystem is not None else LocalFilesystem()
        self.environ = environ if environ is not None else os.environ
        self.home_env = home_env
        self.root_segments = root_segments

    def home_dir(self) -> Path:
        home = self.environ.get(self.home_env, "").strip()
        if not home:
            raise HomeDirectoryError(
                f"Unable to resolve home directory: {self.home_env} is not set."
            )
        return Path(home)

    def root_path(self) -> Path:
        return self.home_dir().joinpath(*self.root_segments)

    def ensure_thread_workspace(self, thread_id: str) -> ThreadWorkspace:
        """Create the thread's directory (and any missing parents) if needed.

        Args:
            thread_id: Raw thread id from the host; normalized before use.

        Returns:
            ThreadWorkspace with ``created=True`` only when this call made
            the directory.

        Raises:
            ValidationError: If *thread_id* is invalid. The filesystem is
                not touched.
            HomeDirectoryError: If the home directory is not set.
            WorkspacePermissionError: If the OS denies checking or creating
                the directory.
            FilesystemError: On any other I/O failure.
        """
        normalized = normalize_thread_id(thread_id)
        root = self.root_path()
        thread_path = root / normalized

        try:
            existed = self.filesystem.exists(thread_path)
            self.filesystem.create_dir_all(thread_path)
        except PermissionError as e:
            logger.warning("Permission denied creating %s: %s", thread_path, e)
            raise WorkspacePermissionError(
                f'Cannot create workspace for "{normalized}". Grant Files and '
                "Folders access to Ken Desktop in System Settings and ensure "
                f"{root} is writable.",
                path=str(thread_path),
            ) from e
        except OSError as e:
            logger.warning("Failed to create %s: %s", thread_path, e)
            raise FilesystemError(
                f"Unable to create thread workspace at {thread_path}: {e}",
                path=str(thread_path),
            ) from e

        if existed:
            logger.debug("Reusing thread workspace %s", thread_path)
        else:
            logger.info("Created thread workspace %s", thread_path)

        return ThreadWorkspace(
            thread_id=normalized,
            root_path=str(root),
            thread_path=str(thread_path),
            created=not existed,
        )
