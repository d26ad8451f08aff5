"""Client-specific exceptions."""

from __future__ import annotations

import httpx


class RPSClientError(Exception):
    """Base exception for all resume parsing client failures."""


class HttpError(RPSClientError):
    """Single error shape for a failed request.

    ``status_code`` is ``None`` when no response was received. ``content`` holds the
    captured response body bytes exactly as received, or ``b""`` when there was
    none or it could not be read. ``body`` is that body as text, used for
    rendering. The subclasses tag which failure produced the error; all of them
    render the same way.
    """

    cause_prefix: str | None = None

    def __init__(
        self,
        url: str,
        *,
        status_code: int | None = None,
        body: str = "",
        content: bytes = b"",
        cause: BaseException | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        self.content = content
        self.cause = cause
        self.response = response
        super().__init__(self._render())

    def _render_cause(self) -> str:
        if self.cause is None:
            return "<nil>"
        if self.cause_prefix:
            return f"{self.cause_prefix}: {self.cause}"
        return str(self.cause)

    def _render(self) -> str:
        status = "no status" if self.status_code is None else str(self.status_code)
        return (
            f"request to {self.url} failed. "
            f"httpStatus: [ {status} ] "
            f"responseBody: [ {self.body} ] "
            f"error: [ {self._render_cause()} ]"
        )

    def __str__(self) -> str:
        return self._render()


class UnsuccessfulResponseError(HttpError):
    """Raised for responses with status >= 400 whose body was captured."""


class BodyReadError(HttpError):
    """Raised when the response body could not be read."""

    cause_prefix = "parsing response"


class ResponseDecodeError(HttpError):
    """Raised when a successful response body does not decode into the target."""

    cause_prefix = "decoding response"


class TransportFailureError(HttpError):
    """Raised when the exchange failed before a usable response was received."""


class GivingUpError(RPSClientError):
    """Raised in place of the last attempt's error once retries are exhausted."""

    def __init__(self, method: str, url: str, attempts: int, last_error: BaseException | None = None) -> None:
        self.method = method
        self.url = url
        self.attempts = attempts
        self.last_error = last_error
        message = f"{method} {url} giving up after {attempts} attempt(s)"
        if last_error is not None:
            message += f": {last_error}"
        super().__init__(message)


class BodyNotReplayableError(RPSClientError):
    """Raised when a retry would need to resend a streamed request body."""

    def __init__(self, method: str, url: str) -> None:
        self.method = method
        self.url = url
        super().__init__(f"{method} {url}: request body cannot be replayed for another attempt")


class ParseDocumentError(RPSClientError):
    """Raised when a resume could not be sent or parsed."""

    def __init__(self, step: str, cause: BaseException) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"{step}: {cause}")
