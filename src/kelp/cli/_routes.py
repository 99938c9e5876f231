"""``kelp routes`` — list the routes a routes directory defines.

Discovers and validates every route file, then prints a table of
METHOD, PATH, whether the route binds in the chosen environment, and
the file it came from.
"""

import argparse
import sys
from pathlib import Path

import anyio

from kelp.errors import BootstrapError
from kelp.routes.manifest import RouteManifest
from kelp.routes.registrar import should_bind


def run_routes(args: argparse.Namespace) -> None:
    """Print the routes under ``args.routes_directory``.

    Exits with status 1 when the directory is missing or a route file
    is invalid.
    """
    root = Path(args.routes_directory)
    if not root.is_dir():
        print(f"Error: Routes directory does not exist: {root}", file=sys.stderr)
        raise SystemExit(1)

    try:
        manifest = anyio.run(RouteManifest.from_directory, root)
    except BootstrapError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not len(manifest):
        print("No routes found.")
        return

    rows: list[tuple[str, str, str, str]] = []
    for route in manifest:
        status = "bound" if should_bind(route, args.environment) else "skipped"
        source = str(route.source.relative_to(root)) if route.source is not None else ""
        rows.append((route.method, route.path, status, source))

    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 4)  # "PATH" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{:<7}}  {{}}"
    print(fmt.format("METHOD", "PATH", "STATUS", "FILE"))
    sep_len = max_method + max_path + 13 + max(len(r[3]) for r in rows)
    print("-" * min(sep_len, 80))
    for row in rows:
        print(fmt.format(*row))
