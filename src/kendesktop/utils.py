"""Shared helpers: config directory resolution."""

from __future__ import annotations

import os
from pathlib import Path

_DIR_ENV_VAR = "KEN_DESKTOP_DIR"
_DEFAULT_DIR_NAME = ".ken-desktop"


def kendesktop_dir() -> Path:
    """Return the config directory.

    ``KEN_DESKTOP_DIR`` wins when set; otherwise ``~/.ken-desktop``.
    """
    raw = os.environ.get(_DIR_ENV_VAR, "").strip()
    if raw:
        return Path(os.path.expanduser(raw))
    return Path.home() / _DEFAULT_DIR_NAME
