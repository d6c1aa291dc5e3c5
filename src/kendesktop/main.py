"""Application entry point — CLI dispatcher for the desktop commands.

Runs exactly one command per process and prints its result as JSON:
  1. `kendesktop save-tokens PROFILE ACCESS [REFRESH]`
  2. `kendesktop load-tokens PROFILE`
  3. `kendesktop clear-tokens PROFILE`
  4. `kendesktop ensure-workspace THREAD`
  5. `kendesktop invoke COMMAND [JSON_ARGS]`: host bridge, takes the same
     command names and camelCase args the desktop shell uses. JSON_ARGS is
     read from stdin when omitted, which keeps tokens out of the process list.

Failures print ``Error: <message>`` to stderr and exit with status 1.
"""

import json
import logging
import sys
from typing import Any

USAGE = """\
Usage:
  kendesktop save-tokens PROFILE ACCESS [REFRESH]
  kendesktop load-tokens PROFILE
  kendesktop clear-tokens PROFILE
  kendesktop ensure-workspace THREAD
  kendesktop invoke COMMAND [JSON_ARGS]
"""

# CLI subcommand → (host command name, positional arg keys, required count)
_SUBCOMMANDS: dict[str, tuple[str, tuple[str, ...], int]] = {
    "save-tokens": ("save_auth_tokens", ("profileId", "accessToken", "refreshToken"), 2),
    "load-tokens": ("load_auth_tokens", ("profileId",), 1),
    "clear-tokens": ("clear_auth_tokens", ("profileId",), 1),
    "ensure-workspace": ("ensure_thread_workspace", ("threadId",), 1),
}


def _usage_exit() -> None:
    print(USAGE, file=sys.stderr, end="")
    sys.exit(2)


def _error_exit(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _parse_args(argv: list[str]) -> tuple[str, dict[str, Any]]:
    """Turn CLI arguments into (command, args) for commands.invoke()."""
    if not argv:
        _usage_exit()

    name, rest = argv[0], argv[1:]

    if name == "invoke":
        if not rest or len(rest) > 2:
            _usage_exit()
        raw = rest[1] if len(rest) == 2 else sys.stdin.read()
        if not raw.strip():
            return rest[0], {}
        try:
            args = json.loads(raw)
        except json.JSONDecodeError as e:
            _error_exit(f"Invalid JSON arguments: {e}")
        if not isinstance(args, dict):
            _error_exit("JSON arguments must be an object.")
        return rest[0], args

    spec = _SUBCOMMANDS.get(name)
    if spec is None:
        _usage_exit()
    command, keys, required = spec
    if not required <= len(rest) <= len(keys):
        _usage_exit()
    return command, dict(zip(keys, rest))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] in ("-h", "--help", "help"):
        print(USAGE, end="")
        return

    command, args = _parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.WARNING,
    )

    from .commands import invoke
    from .desktop_context import create_desktop_context
    from .errors import CommandError
    from .settings import load_settings

    try:
        config = load_settings()
    except (OSError, ValueError) as e:
        _error_exit(f"{e}\nCheck your settings.toml configuration.")

    logging.getLogger("kendesktop").setLevel(config.log_level)
    logger = logging.getLogger(__name__)
    logger.debug("Running %s", command)

    ctx = create_desktop_context(config)
    try:
        result = invoke(ctx, command, args)
    except CommandError as e:
        _error_exit(e.message)

    print(json.dumps(result))


if __name__ == "__main__":
    main()
