"""Shared fixtures: credential store doubles and a fake home directory."""

from pathlib import Path

import pytest

from kendesktop.vault.adapter import CredentialVault
from kendesktop.vault.store import MemoryCredentialStore
from kendesktop.workspace.provisioner import WorkspaceProvisioner


class RecordingStore(MemoryCredentialStore):
    """Memory store that logs every call and can be told to fail.

    ``fail_on`` maps (operation, account) to the exception to raise, e.g.
    ``{("set", "p1:refresh"): CredentialStoreError("disk full")}``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str]] = []
        self.fail_on: dict[tuple[str, str], Exception] = {}

    def _check(self, op: str, account: str) -> None:
        self.calls.append((op, account))
        error = self.fail_on.get((op, account))
        if error is not None:
            raise error

    def set_secret(self, service: str, account: str, secret: str) -> None:
        self._check("set", account)
        super().set_secret(service, account, secret)

    def get_secret(self, service: str, account: str) -> str | None:
        self._check("get", account)
        return super().get_secret(service, account)

    def delete_secret(self, service: str, account: str) -> bool:
        self._check("delete", account)
        return super().delete_secret(service, account)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def vault(store: RecordingStore) -> CredentialVault:
    return CredentialVault(store, service="ken-desktop-test")


@pytest.fixture
def home(tmp_path: Path) -> Path:
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def provisioner(home: Path) -> WorkspaceProvisioner:
    return WorkspaceProvisioner(environ={"HOME": str(home)})
