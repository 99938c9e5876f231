"""Write a :class:`Response` to an ASGI ``send`` channel."""

from kelp._internal.asgi import Send
from kelp.transport.response import Response

# informational, 204 No Content and 304 Not Modified never carry a body
_BODYLESS = frozenset({204, 304})


def _encode(response: Response, body: bytes) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type)]
    pairs += [(n.lower(), v) for n, v in response.headers if n.lower() != "content-length"]
    pairs.append(("content-length", str(len(body))))
    return [(n.encode("latin-1"), v.encode("latin-1")) for n, v in pairs]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Send the start and body messages for *response*.

    A HEAD response keeps the content-length of the body it omits.
    """
    status = response.status
    body = b"" if status < 200 or status in _BODYLESS else response.body_bytes
    await send({"type": "http.response.start", "status": status, "headers": _encode(response, body)})
    await send({"type": "http.response.body", "body": b"" if head else body})
