"""CLI entry point: parse args, load shared context, dispatch command handlers."""

from __future__ import annotations

import logging
import os
import sys

from gitsense.app.cli_support.parser import create_parser
from gitsense.app.commands.helpers.runtime import CommandRuntime, data_root
from gitsense.app.commands.registry import get_command_handlers
from gitsense.core.config import config_path, load_config
from gitsense.core.errors import FilterError, SearchToolError, StoreUnavailableError
from gitsense.core.git import GitError
from gitsense.core.output import error

logger = logging.getLogger(__name__)

_DEBUG_ENV = "GITSENSE_DEBUG"


def _configure_logging(debug: bool) -> None:
    enabled = debug or os.environ.get(_DEBUG_ENV, "").lower() in {"1", "true", "yes"}
    logging.basicConfig(
        level=logging.DEBUG if enabled else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_shared_runtime(args) -> None:
    """Load config once and attach it to parsed args."""
    root = data_root()
    args.runtime = CommandRuntime(config=load_config(config_path(root)), root=root)


def _resolve_handler(command: str):
    return get_command_handlers()[command]


def main() -> None:
    # Ensure Unicode output works on Windows terminals (cp1252 etc.)
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            try:
                stream.reconfigure(encoding="utf-8", errors="replace")
            except (AttributeError, OSError):
                logger.debug(
                    "Skipping stream reconfigure for %s (not supported)",
                    getattr(stream, "name", "<stream>"),
                )

    parser = create_parser()
    args = parser.parse_args()
    _configure_logging(args.debug)

    try:
        _load_shared_runtime(args)
        handler = _resolve_handler(args.command)
        handler(args)
    except FilterError as exc:
        error(f"invalid filter: {exc}")
        sys.exit(1)
    except (StoreUnavailableError, SearchToolError, GitError) as exc:
        error(str(exc))
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)


if __name__ == "__main__":
    main()
