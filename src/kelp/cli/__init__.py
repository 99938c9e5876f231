"""Kelp CLI — inspect a routes directory.

Entry point registered as ``kelp`` in ``pyproject.toml``::

    [project.scripts]
    kelp = "kelp.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``kelp`` command."""
    parser = argparse.ArgumentParser(
        prog="kelp",
        description="Kelp — filesystem routes and middleware checkpoints for an ASGI app.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- kelp routes ------------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List the routes in a routes directory")
    routes_parser.add_argument("routes_directory", help="Path to the routes directory")
    routes_parser.add_argument(
        "--environment",
        choices=("development", "production"),
        default="development",
        help="Environment used to decide which routes bind (default: development)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from kelp.cli._routes import run_routes

        run_routes(args)
