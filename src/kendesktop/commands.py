"""Host-facing commands — the operations the desktop shell invokes.

Each command takes plain strings and returns a JSON-ready value (dict or
None). Every failure is raised as CommandError whose message is the text
the host shows to the user.

invoke() dispatches by command name with the host's camelCase argument
keys (``profileId``, ``accessToken``, ``refreshToken``, ``threadId``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .desktop_context import DesktopContext
from .errors import CommandError, KenDesktopError

logger = logging.getLogger(__name__)


def save_auth_tokens(
    ctx: DesktopContext,
    profile_id: str,
    access_token: str,
    refresh_token: str | None = None,
) -> None:
    try:
        ctx.vault.save_tokens(profile_id, access_token, refresh_token)
    except KenDesktopError as e:
        raise CommandError(e.message) from e


def load_auth_tokens(ctx: DesktopContext, profile_id: str) -> dict[str, Any] | None:
    try:
        tokens = ctx.vault.load_tokens(profile_id)
    except KenDesktopError as e:
        raise CommandError(e.message) from e
    return tokens.to_dict() if tokens is not None else None


def clear_auth_tokens(ctx: DesktopContext, profile_id: str) -> None:
    try:
        ctx.vault.clear_tokens(profile_id)
    except KenDesktopError as e:
        raise CommandError(e.message) from e


def ensure_thread_workspace(ctx: DesktopContext, thread_id: str) -> dict[str, Any]:
    try:
        workspace = ctx.provisioner.ensure_thread_workspace(thread_id)
    except KenDesktopError as e:
        raise CommandError(e.message) from e
    return workspace.to_dict()


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _required_str(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    if value is None:
        raise CommandError(f"{key} is required.")
    if not isinstance(value, str):
        raise CommandError(f"{key} must be a string.")
    return value


def _optional_str(args: Mapping[str, Any], key: str) -> str | None:
    value = args.get(key)
    if value is not None and not isinstance(value, str):
        raise CommandError(f"{key} must be a string.")
    return value


def _invoke_save(ctx: DesktopContext, args: Mapping[str, Any]) -> None:
    return save_auth_tokens(
        ctx,
        _required_str(args, "profileId"),
        _required_str(args, "accessToken"),
        _optional_str(args, "refreshToken"),
    )


def _invoke_load(ctx: DesktopContext, args: Mapping[str, Any]) -> dict[str, Any] | None:
    return load_auth_tokens(ctx, _required_str(args, "profileId"))


def _invoke_clear(ctx: DesktopContext, args: Mapping[str, Any]) -> None:
    return clear_auth_tokens(ctx, _required_str(args, "profileId"))


def _invoke_ensure(ctx: DesktopContext, args: Mapping[str, Any]) -> dict[str, Any]:
    return ensure_thread_workspace(ctx, _required_str(args, "threadId"))


COMMANDS: dict[str, Callable[[DesktopContext, Mapping[str, Any]], Any]] = {
    "save_auth_tokens": _invoke_save,
    "load_auth_tokens": _invoke_load,
    "clear_auth_tokens": _invoke_clear,
    "ensure_thread_workspace": _invoke_ensure,
}


def invoke(
    ctx: DesktopContext, command: str, args: Mapping[str, Any] | None = None
) -> Any:
    """Run *command* with host-style *args* and return its JSON-ready result.

    Raises:
        CommandError: For unknown commands, missing arguments, or any
            failure inside the command.
    """
    handler = COMMANDS.get(command)
    if handler is None:
        raise CommandError(f"Unsupported command: {command}")
    logger.debug("Invoking %s", command)
    return handler(ctx, args or {})
