"""Desktop settings — reads settings.toml + .env to produce a DesktopConfig.

All settings are optional: a missing settings.toml yields the built-in
defaults, so the services work on a fresh machine without any setup step.

Key entities:
  - DesktopConfig: frozen dataclass with all resolved config.
  - load_settings(): parse .env + settings.toml + env overrides → DesktopConfig.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .utils import kendesktop_dir

logger = logging.getLogger(__name__)

DEFAULT_KEYCHAIN_SERVICE = "ken-desktop"
DEFAULT_ROOT_SEGMENTS = ("Executive Assistant", "Ken")
DEFAULT_HOME_ENV = "HOME"

STORE_BACKENDS = ("keyring", "memory")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ---------------------------------------------------------------------------
# DesktopConfig
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DesktopConfig:
    """Resolved configuration for the desktop services.

    Values are final; components built from this config do no env lookups
    of their own except the home directory, which is read per call.
    """

    config_dir: Path = field(default_factory=kendesktop_dir)

    # Vault
    keychain_service: str = DEFAULT_KEYCHAIN_SERVICE
    store_backend: str = "keyring"

    # Workspace
    root_segments: tuple[str, ...] = DEFAULT_ROOT_SEGMENTS
    home_env: str = DEFAULT_HOME_ENV

    # Logging
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------

# Environment variable → DesktopConfig field
_ENV_OVERRIDES = {
    "KEN_DESKTOP_KEYCHAIN_SERVICE": "keychain_service",
    "KEN_DESKTOP_STORE_BACKEND": "store_backend",
    "KEN_DESKTOP_LOG_LEVEL": "log_level",
}


def load_settings(config_dir: Path | None = None) -> DesktopConfig:
    """Read .env + settings.toml and return a DesktopConfig.

    Precedence per key: environment variable > settings.toml > default.

    Args:
        config_dir: Override for the base config directory.
                    Defaults to ``kendesktop_dir()``.

    Raises:
        ValueError: If a configured value is invalid.
    """
    if config_dir is None:
        config_dir = kendesktop_dir()

    # Load .env files (local cwd first, then config_dir)
    local_env = Path(".env")
    global_env = config_dir / ".env"
    if local_env.is_file():
        load_dotenv(local_env)
    if global_env.is_file():
        load_dotenv(global_env)

    raw: dict = {}
    toml_path = config_dir / "settings.toml"
    if toml_path.is_file():
        with open(toml_path, "rb") as f:
            raw = tomllib.load(f)
    else:
        logger.debug("No settings file at %s, using defaults", toml_path)

    vault_section = raw.get("vault", {})
    workspace_section = raw.get("workspace", {})
    for name, section in (("vault", vault_section), ("workspace", workspace_section)):
        if not isinstance(section, dict):
            raise ValueError(f"[{name}] must be a table.")

    values: dict[str, object] = {
        "keychain_service": vault_section.get("service", DEFAULT_KEYCHAIN_SERVICE),
        "store_backend": vault_section.get("backend", "keyring"),
        "log_level": raw.get("log_level", "INFO"),
    }
    for env_name, key in _ENV_OVERRIDES.items():
        env_value = os.getenv(env_name, "").strip()
        if env_value:
            values[key] = env_value

    return _build_config(
        config_dir,
        values,
        workspace_section.get("root_segments", list(DEFAULT_ROOT_SEGMENTS)),
        workspace_section.get("home_env", DEFAULT_HOME_ENV),
    )


def _build_config(
    config_dir: Path,
    values: dict[str, object],
    raw_segments: object,
    home_env: object,
) -> DesktopConfig:
    """Validate merged values into a DesktopConfig."""
    service = str(values["keychain_service"]).strip()
    if not service:
        raise ValueError("vault.service must not be empty.")

    backend = str(values["store_backend"]).strip().lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(
            f"Unknown vault.backend '{backend}'. "
            f"Expected one of: {', '.join(STORE_BACKENDS)}."
        )

    log_level = str(values["log_level"]).strip().upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"Unknown log_level '{log_level}'.")

    if not isinstance(raw_segments, list) or not raw_segments:
        raise ValueError("workspace.root_segments must be a non-empty list.")
    segments = tuple(str(s).strip() for s in raw_segments)
    for segment in segments:
        # Each entry is one path component below the home directory
        if not segment or segment in (".", "..") or "/" in segment or "\\" in segment:
            raise ValueError(f"Invalid workspace.root_segments entry: {segment!r}")

    home_env = str(home_env).strip()
    if not home_env:
        raise ValueError("workspace.home_env must not be empty.")

    return DesktopConfig(
        config_dir=config_dir,
        keychain_service=service,
        store_backend=backend,
        root_segments=segments,
        home_env=home_env,
        log_level=log_level,
    )

