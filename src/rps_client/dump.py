"""HTTP/1.1 wire-format dumps of outgoing requests."""

from __future__ import annotations

import httpx


def dump_request_out(request: httpx.Request, include_body: bool) -> bytes:
    """Serialize ``request`` the way it goes out on the wire.

    Headers are always included. The body is appended only when
    ``include_body`` is set and the content is already in memory; a streamed
    body is never consumed here, so its dump stops after the headers.
    """
    target = request.url.raw_path or b"/"
    lines = [request.method.encode("ascii") + b" " + target + b" HTTP/1.1"]
    for name, value in request.headers.raw:
        lines.append(name + b": " + value)
    dump = b"\r\n".join(lines) + b"\r\n\r\n"
    if include_body:
        try:
            dump += request.content
        except httpx.RequestNotRead:
            pass
    return dump
