"""CLI entry point — ``python -m user_service``.

Invokes the create-user handler from the shell, the way API Gateway would.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from user_service.app import App, configure_logging
from user_service.models import load_config
from user_service.registry import list_registered


def _print_modules() -> None:
    """Print all registered stores and id generators."""
    modules = list_registered()
    for category, entries in modules.items():
        print(f"\n{category.upper()}")
        print("-" * len(category))
        if not entries:
            print("  (none)")
        for key, class_name in entries.items():
            print(f"  {key:30s} {class_name}")
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="user-service",
        description="Create a user by invoking the handler locally.",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to the service YAML config file.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-b", "--body",
        help="JSON request body, e.g. '{\"e-mail\": \"a@b.com\", \"name\": \"Ann\"}'.",
    )
    source.add_argument(
        "-e", "--event",
        help="Path to an API Gateway proxy event JSON file.",
    )
    parser.add_argument(
        "--local",
        action="store_true",
        default=False,
        help="Force local mode (synthetic claims, local store endpoint).",
    )
    parser.add_argument(
        "-l", "--list-modules",
        action="store_true",
        default=False,
        help="List all registered stores and id generators, then exit.",
    )

    args = parser.parse_args(argv)

    if args.list_modules:
        _print_modules()
        return 0

    if args.body is None and args.event is None:
        parser.error("one of the arguments -b/--body -e/--event is required")

    config = load_config(args.config)
    if args.local:
        config.settings.local = True
    configure_logging(config.settings.log_level)

    if args.event is not None:
        event = json.loads(Path(args.event).read_text())
    else:
        event = {"body": args.body}

    app = App(config)
    try:
        response = app.invoke(event)
    finally:
        app.close()

    print(json.dumps(response, indent=2))
    return 0 if 200 <= response["statusCode"] < 300 else 1


if __name__ == "__main__":
    sys.exit(main())
