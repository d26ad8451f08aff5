"""Turns the final attempt outcome into a response, a decoded value, or an HttpError."""

from __future__ import annotations

import logging
from typing import Any, Callable

import httpx
from pydantic import TypeAdapter

from .dump import dump_request_out
from .exceptions import BodyReadError, ResponseDecodeError, TransportFailureError, UnsuccessfulResponseError
from .retry import AttemptOutcome

logger = logging.getLogger(__name__)

BodyReader = Callable[[httpx.Response], bytes]
JSONDecoder = Callable[[bytes, Any], Any]
RequestDumper = Callable[[httpx.Request, bool], bytes]

READ_ERRORS = (httpx.HTTPError, httpx.StreamError, OSError)


def read_body(response: httpx.Response) -> bytes:
    return response.read()


def decode_json(content: bytes, target: Any) -> Any:
    return TypeAdapter(target).validate_json(content)


class ResponseResolver:
    def __init__(
        self,
        *,
        dump_logger: Callable[[bytes], None] | None = None,
        dump_body: bool = False,
        body_reader: BodyReader = read_body,
        json_decoder: JSONDecoder = decode_json,
        request_dumper: RequestDumper = dump_request_out,
    ) -> None:
        self.dump_logger = dump_logger
        self.dump_body = dump_body
        self._read_body = body_reader
        self._decode_json = json_decoder
        self._dump_request = request_dumper

    def dump(self, request: httpx.Request) -> None:
        """Hand a wire dump of ``request`` to the dump logger, if there is one."""
        if self.dump_logger is None:
            return
        try:
            self.dump_logger(self._dump_request(request, self.dump_body))
        except Exception as exc:
            logger.debug("Could not dump %s %s: %s", request.method, request.url, exc)

    def resolve(
        self,
        url: str,
        outcome: AttemptOutcome,
        target: Any = None,
    ) -> tuple[httpx.Response, Any]:
        """Classify ``outcome`` and, on success, decode the body into ``target``.

        Without a target the response is returned unread and the caller owns its
        body. Every failure is raised as an ``HttpError`` subclass.
        """
        response, error = outcome.response, outcome.error

        if response is not None and response.status_code >= 400:
            self._raise_unsuccessful(url, response, error)

        if response is None:
            raise TransportFailureError(url, cause=error) from error
        if error is not None:
            response.close()
            raise TransportFailureError(url, status_code=response.status_code, cause=error, response=response) from error

        if target is None:
            return response, None

        try:
            content = self._read_body(response)
        except READ_ERRORS as exc:
            raise BodyReadError(url, status_code=response.status_code, cause=exc, response=response) from exc
        finally:
            response.close()

        try:
            data = self._decode_json(content, target)
        except ValueError as exc:
            raise ResponseDecodeError(url, status_code=response.status_code, cause=exc, response=response) from exc
        return response, data

    def _raise_unsuccessful(
        self,
        url: str,
        response: httpx.Response,
        error: BaseException | None,
    ) -> None:
        try:
            content = self._read_body(response)
        except READ_ERRORS as exc:
            raise BodyReadError(url, status_code=response.status_code, cause=exc, response=response) from exc
        finally:
            response.close()
        raise UnsuccessfulResponseError(
            url,
            status_code=response.status_code,
            body=content.decode("utf-8", errors="replace"),
            content=content,
            cause=error,
            response=response,
        ) from error
