"""DesktopContext — bundles the resolved config with its service instances.

The command layer and the CLI receive one DesktopContext holding the
DesktopConfig plus the CredentialVault and WorkspaceProvisioner built from
it. Tests build contexts around in-memory stores and temporary home dirs.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .settings import DesktopConfig
    from .vault.adapter import CredentialVault
    from .workspace.provisioner import WorkspaceProvisioner


@dataclass
class DesktopContext:
    """Runtime context for the desktop services."""

    config: DesktopConfig
    vault: CredentialVault
    provisioner: WorkspaceProvisioner


def create_desktop_context(
    config: DesktopConfig, environ: Mapping[str, str] | None = None
) -> DesktopContext:
    """Build a DesktopContext from a DesktopConfig.

    The vault writes through the configured store backend. The provisioner
    reads the home directory from *environ*, which defaults to the live
    ``os.environ`` so it is looked up on every call.
    """
    from .vault.adapter import CredentialVault
    from .vault.store import KeyringCredentialStore, MemoryCredentialStore
    from .workspace.provisioner import LocalFilesystem, WorkspaceProvisioner

    if config.store_backend == "memory":
        store = MemoryCredentialStore()
    else:
        store = KeyringCredentialStore()

    vault = CredentialVault(store, service=config.keychain_service)

    provisioner = WorkspaceProvisioner(
        filesystem=LocalFilesystem(),
        environ=environ,
        home_env=config.home_env,
        root_segments=config.root_segments,
    )

    return DesktopContext(config=config, vault=vault, provisioner=provisioner)
