"""Credential store backends keyed by (service, account).

The store boundary reports absence explicitly: ``get_secret`` returns None
and ``delete_secret`` returns False when there is no entry. Any other
failure raises CredentialStoreError, or CredentialStoreUnavailable when no
store handle can be obtained at all. Vendor-specific error text is
interpreted here and nowhere else.

Key classes: CredentialStore, KeyringCredentialStore, MemoryCredentialStore.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import keyring
from keyring.errors import InitError, KeyringError, KeyringLocked, NoKeyringError

logger = logging.getLogger(__name__)

# Lowercase fragments that keyring backends use when an entry does not exist.
# macOS: "Item not found"; Windows: "Password not found";
# Secret Service: "No such password!"; others: "No entry found", etc.
MISSING_ENTRY_PHRASES = (
    "no entry",
    "item not found",
    "not found",
    "no such",
    "does not exist",
    "could not be found",
)


class CredentialStoreError(Exception):
    """A store operation failed for a reason other than absence."""


class CredentialStoreUnavailable(CredentialStoreError):
    """No usable store backend (missing, locked or failed to initialize)."""


def is_missing_entry_error(error: BaseException) -> bool:
    """Return True if *error* reads like "entry does not exist".

    Case-insensitive substring match against MISSING_ENTRY_PHRASES. Backend
    message text is not part of keyring's API; new phrasings go in that tuple.
    """
    rendered = str(error).lower()
    return any(phrase in rendered for phrase in MISSING_ENTRY_PHRASES)


class CredentialStore(ABC):
    """Secret storage keyed by (service, account)."""

    @abstractmethod
    def set_secret(self, service: str, account: str, secret: str) -> None:
        """Create or overwrite the entry."""

    @abstractmethod
    def get_secret(self, service: str, account: str) -> str | None:
        """Return the stored secret, or None if there is no entry."""

    @abstractmethod
    def delete_secret(self, service: str, account: str) -> bool:
        """Delete the entry. Returns False if there was nothing to delete."""


# ---------------------------------------------------------------------------
# OS keychain
# ---------------------------------------------------------------------------


class KeyringCredentialStore(CredentialStore):
    """OS keychain via the ``keyring`` library (Keychain, Credential Manager,
    Secret Service, ...)."""

    def set_secret(self, service: str, account: str, secret: str) -> None:
        try:
            keyring.set_password(service, account, secret)
        except (NoKeyringError, InitError, KeyringLocked) as e:
            raise CredentialStoreUnavailable(str(e) or type(e).__name__) from e
        except KeyringError as e:
            raise CredentialStoreError(str(e) or type(e).__name__) from e

    def get_secret(self, service: str, account: str) -> str | None:
        try:
            return keyring.get_password(service, account)
        except (NoKeyringError, InitError, KeyringLocked) as e:
            raise CredentialStoreUnavailable(str(e) or type(e).__name__) from e
        except KeyringError as e:
            if is_missing_entry_error(e):
                logger.debug("No keychain entry for %s/%s", service, account)
                return None
            raise CredentialStoreError(str(e) or type(e).__name__) from e

    def delete_secret(self, service: str, account: str) -> bool:
        try:
            keyring.delete_password(service, account)
        except (NoKeyringError, InitError, KeyringLocked) as e:
            raise CredentialStoreUnavailable(str(e) or type(e).__name__) from e
        except KeyringError as e:
            if is_missing_entry_error(e):
                logger.debug("No keychain entry to delete for %s/%s", service, account)
                return False
            raise CredentialStoreError(str(e) or type(e).__name__) from e
        return True


# ---------------------------------------------------------------------------
# In-process store
# ---------------------------------------------------------------------------


class MemoryCredentialStore(CredentialStore):
    """Dict-backed store for headless runs and tests. Nothing is persisted."""

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], str] = {}

    def set_secret(self, service: str, account: str, secret: str) -> None:
        self._entries[(service, account)] = secret

    def get_secret(self, service: str, account: str) -> str | None:
        return self._entries.get((service, account))

    def delete_secret(self, service: str, account: str) -> bool:
        return self._entries.pop((service, account), None) is not None

    def __len__(self) -> int:
        return len(self._entries)
