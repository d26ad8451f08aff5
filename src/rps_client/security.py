"""Keeping the service token out of logs and off plain-text connections."""

from __future__ import annotations

import httpx

REDACTED = "[REDACTED]"

# Header names compared lowercase; the service authenticates with ``token``.
SENSITIVE_HEADERS = frozenset({"token", "authorization", "proxy-authorization"})

LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


def redact_headers(headers: httpx.Headers) -> list[tuple[str, str]]:
    """Header pairs for a log line, with credential values blanked out."""
    return [
        (name, REDACTED if name.lower() in SENSITIVE_HEADERS else value)
        for name, value in headers.multi_items()
    ]


def redact_dump(dump: bytes) -> bytes:
    """Blank out credential header values in a request wire dump.

    The request line and body are left as they are.
    """
    head, separator, body = dump.partition(b"\r\n\r\n")
    lines = head.split(b"\r\n")
    for index in range(1, len(lines)):
        name, colon, _ = lines[index].partition(b":")
        if colon and name.strip().lower().decode("latin-1") in SENSITIVE_HEADERS:
            lines[index] = name + b": " + REDACTED.encode("ascii")
    return b"\r\n".join(lines) + separator + body


def normalize_base_url(url: str, *, allow_http: bool = False) -> str:
    """Check the service URL and return it without a trailing slash.

    Plain ``http`` is accepted for loopback hosts, or anywhere when
    ``allow_http`` is set.
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ValueError(f"Invalid base_url: {exc}") from exc
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"Unsupported base_url scheme: {parsed.scheme or '<none>'}")
    if not parsed.host:
        raise ValueError("base_url must include a host")
    if parsed.query or parsed.fragment:
        raise ValueError("base_url must not carry a query or fragment")
    if parsed.scheme == "http" and not allow_http and parsed.host.lower() not in LOOPBACK_HOSTS:
        raise ValueError("Non-HTTPS base_url is not allowed without allow_http=True")
    return url.rstrip("/")
