"""Built-in body and cookie parsing middleware.

Layers registered after these see ``request.parsed_body`` and
``request.cookies`` filled in. Parsing never blocks a request: a body
that fails to parse is answered with 400.
"""

import json as json_module
from urllib.parse import parse_qs

from kelp.errors import HTTPError
from kelp.transport.protocol import Next
from kelp.transport.request import Request
from kelp.transport.response import Response


def _media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class BodyParser:
    """Parse JSON and URL-encoded request bodies into ``parsed_body``.

    JSON bodies become whatever ``json.loads`` returns. URL-encoded
    bodies become a dict; keys given more than once map to a list.
    Other content types are left alone.
    """

    __slots__ = ("_json", "_urlencoded")

    def __init__(self, *, json: bool = True, urlencoded: bool = True) -> None:
        self._json = json
        self._urlencoded = urlencoded

    async def __call__(self, request: Request, next: Next) -> Response:
        media_type = _media_type(request.content_type)

        if self._json and (media_type == "application/json" or media_type.endswith("+json")):
            raw = await request.body()
            if raw:
                try:
                    parsed = json_module.loads(raw)
                except ValueError as exc:
                    raise HTTPError(status=400, detail="Malformed JSON body") from exc
                request = request.replace(parsed_body=parsed)

        elif self._urlencoded and media_type == "application/x-www-form-urlencoded":
            raw = await request.body()
            fields = parse_qs(raw.decode("latin-1"), keep_blank_values=True)
            request = request.replace(
                parsed_body={k: v[0] if len(v) == 1 else v for k, v in fields.items()}
            )

        return await next(request)


def parse_cookie_header(header: str) -> dict[str, str]:
    """Split a ``Cookie`` header into names and values.

    Pairs without ``=`` are dropped. A name given twice keeps its first
    value, the one the browser sent for the most specific path.
    """
    cookies: dict[str, str] = {}
    for pair in header.split(";"):
        name, sep, value = pair.partition("=")
        name = name.strip()
        if sep and name:
            cookies.setdefault(name, value.strip().strip('"'))
    return cookies


async def cookie_parser(request: Request, next: Next) -> Response:
    """Parse the ``Cookie`` header into ``request.cookies``."""
    header = request.headers.get("cookie")
    if header:
        request = request.replace(cookies=parse_cookie_header(header))
    return await next(request)
