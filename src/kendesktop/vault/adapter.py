"""Per-profile access/refresh token storage on top of a CredentialStore.

Each profile owns two independent entries under one shared service name:
``<profile_id>:access`` and ``<profile_id>:refresh``. Tokens are never stored
as a single unit, and a missing entry is a normal outcome rather than an
error.

Key class: CredentialVault. Key helpers: account_name(), normalize_token().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..errors import StoreAccessError, StoreOperationError, ValidationError
from ..settings import DEFAULT_KEYCHAIN_SERVICE
from .store import CredentialStore, CredentialStoreError, CredentialStoreUnavailable

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"
TOKEN_KINDS = (ACCESS, REFRESH)


@dataclass(frozen=True)
class AuthTokens:
    """Token pair returned by CredentialVault.load_tokens()."""

    access_token: str
    refresh_token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"accessToken": self.access_token, "refreshToken": self.refresh_token}


def account_name(profile_id: str, token_kind: str) -> str:
    """Return the keychain account for a profile's token.

    No escaping is applied to *profile_id*. The fixed kind suffix keeps
    distinct pairs distinct, but an account cannot be split back into
    profile and kind when the profile id itself contains ``:``.
    """
    if token_kind not in TOKEN_KINDS:
        raise ValueError(f"Unknown token kind: {token_kind}")
    return f"{profile_id}:{token_kind}"


def normalize_token(value: str | None) -> str | None:
    """Trim *value*; blank or None means "no token"."""
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class CredentialVault:
    """Save, load and clear a profile's tokens.

    Writes always go access first, then refresh. There is no rollback: if
    the refresh step fails after the access token was written, the error is
    raised and the access token stays saved. Retrying the same save is safe.
    """

    def __init__(
        self, store: CredentialStore, service: str = DEFAULT_KEYCHAIN_SERVICE
    ) -> None:
        self.store = store
        self.service = service

    def save_tokens(
        self, profile_id: str, access_token: str, refresh_token: str | None = None
    ) -> None:
        """Store the access token and store or remove the refresh token.

        A blank or missing *refresh_token* deletes any previously saved one.

        Raises:
            ValidationError: If *access_token* is blank. Nothing is written.
            StoreAccessError: If the keychain cannot be opened.
            StoreOperationError: If a write or delete fails.
        """
        normalized_access = normalize_token(access_token)
        if normalized_access is None:
            raise ValidationError("Access token is required.")

        self._set(profile_id, ACCESS, normalized_access)

        normalized_refresh = normalize_token(refresh_token)
        if normalized_refresh is not None:
            self._set(profile_id, REFRESH, normalized_refresh)
        else:
            self._delete_if_present(profile_id, REFRESH)

    def load_tokens(self, profile_id: str) -> AuthTokens | None:
        """Return the stored pair, or None if no access token is saved.

        The refresh entry is only read when an access token exists.
        """
        access_token = self._get(profile_id, ACCESS)
        if access_token is None:
            logger.debug("No stored tokens for profile %s", profile_id)
            return None

        refresh_token = self._get(profile_id, REFRESH)
        return AuthTokens(access_token=access_token, refresh_token=refresh_token)

    def clear_tokens(self, profile_id: str) -> None:
        """Delete both entries; entries that are already gone are skipped."""
        self._delete_if_present(profile_id, ACCESS)
        self._delete_if_present(profile_id, REFRESH)

    # --- store calls with error mapping ---

    def _set(self, profile_id: str, token_kind: str, value: str) -> None:
        account = account_name(profile_id, token_kind)
        try:
            self.store.set_secret(self.service, account, value)
        except CredentialStoreUnavailable as e:
            raise _access_error(account, e) from e
        except CredentialStoreError as e:
            logger.warning("Keychain write failed for %s: %s", account, e)
            raise StoreOperationError(
                f"Unable to save {token_kind} token: {e}"
            ) from e
        logger.info("Saved %s token for %s", token_kind, account)

    def _get(self, profile_id: str, token_kind: str) -> str | None:
        account = account_name(profile_id, token_kind)
        try:
            return self.store.get_secret(self.service, account)
        except CredentialStoreUnavailable as e:
            raise _access_error(account, e) from e
        except CredentialStoreError as e:
            logger.warning("Keychain read failed for %s: %s", account, e)
            raise StoreOperationError(
                f"Unable to read {token_kind} token: {e}"
            ) from e

    def _delete_if_present(self, profile_id: str, token_kind: str) -> None:
        account = account_name(profile_id, token_kind)
        try:
            deleted = self.store.delete_secret(self.service, account)
        except CredentialStoreUnavailable as e:
            raise _access_error(account, e) from e
        except CredentialStoreError as e:
            logger.warning("Keychain delete failed for %s: %s", account, e)
            raise StoreOperationError(f"Unable to clear keychain entry: {e}") from e
        if deleted:
            logger.info("Cleared %s", account)
        else:
            logger.debug("Nothing to clear for %s", account)


def _access_error(account: str, error: CredentialStoreError) -> StoreAccessError:
    logger.warning("Keychain unavailable for %s: %s", account, error)
    return StoreAccessError(f"Unable to access keychain entry: {error}")
