"""Response to ASGI messages.

One ``http.response.start`` and one ``http.response.body`` per response;
wren never streams.
"""

from wren._internal.asgi import Send
from wren.http.response import Response

# 1xx, 204 and 304 carry no message body
_NO_BODY = frozenset({204, 304})


def _encode(value: str) -> bytes:
    return value.encode("latin-1")


async def send_response(response: Response, send: Send) -> None:
    """Emit *response* through ASGI ``send``, with a Content-Length."""
    status = response.status
    body = b"" if status < 200 or status in _NO_BODY else response.body_bytes

    headers = [(b"content-type", _encode(response.content_type))]
    headers += [(_encode(name.lower()), _encode(value)) for name, value in response.headers]
    headers.append((b"content-length", _encode(str(len(body)))))

    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body})
