"""Serve the public directory at the site root.

Only GET and HEAD are answered. A request with no matching file, or any
other method, continues down the stack so routes can claim the path.
"""

import mimetypes
from pathlib import Path

import anyio.to_thread

from kelp.transport.protocol import Next
from kelp.transport.request import Request
from kelp.transport.response import Response

CACHE_CONTROL = "public, max-age=3600"


class StaticFiles:
    """Middleware mapping ``/a/b.css`` to ``<directory>/a/b.css``.

    A directory answers with its ``index.html``. Targets that resolve
    outside *directory*, symlinks included, are refused with 403.
    """

    __slots__ = ("directory", "index")

    def __init__(self, directory: str | Path, *, index: str = "index.html") -> None:
        self.directory = Path(directory).resolve()
        self.index = index

    def locate(self, url_path: str) -> Path | None:
        """Return the file for *url_path*, or None when there is none.

        Raises:
            PermissionError: *url_path* escapes the directory.
        """
        target = (self.directory / url_path.lstrip("/")).resolve()
        if not target.is_relative_to(self.directory):
            raise PermissionError(url_path)
        if target.is_dir():
            target = target / self.index
        return target if target.is_file() else None

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method not in ("GET", "HEAD"):
            return await next(request)
        try:
            target = self.locate(request.path)
        except PermissionError:
            return Response("Forbidden", status=403)
        if target is None:
            return await next(request)

        content = await anyio.to_thread.run_sync(target.read_bytes)
        content_type = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
        return Response(content, content_type=content_type).with_header(
            "Cache-Control", CACHE_CONTROL
        )
