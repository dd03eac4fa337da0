"""Response sending — the last step of the pipeline.

A Response becomes exactly two ASGI messages: ``http.response.start``
with the status and encoded headers, then one ``http.response.body``.
"""

from roost._internal.asgi import Send
from roost.http.response import Response

# Statuses that never carry a message body
_BODYLESS = frozenset({204, 205, 304})


def encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    """Lowercased latin-1 header pairs, content-type first, content-length last."""
    pairs = [("content-type", response.content_type), *response.headers]
    pairs.append(("content-length", str(content_length)))
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send) -> None:
    """Write *response* to the ASGI *send* channel."""
    status = response.status
    body = b"" if status < 200 or status in _BODYLESS else response.body_bytes
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body})
