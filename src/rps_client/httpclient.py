"""HTTP client with opt-in retries, unified errors, and request dumps."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, TypeVar

import httpx

from .options import ClientOptions, resolve_options
from .resolver import ResponseResolver
from .retry import RetryExecutor
from .security import redact_headers

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_CONNECTIONS = 100
DEFAULT_MAX_KEEPALIVE_CONNECTIONS = 20


def _build_limits(options: ClientOptions) -> httpx.Limits:
    # httpx pools per origin without separate per-host knobs, so the per-host
    # connection cap bounds the whole pool and the per-host idle cap is not used.
    return httpx.Limits(
        max_connections=options.max_connections_per_host or DEFAULT_MAX_CONNECTIONS,
        max_keepalive_connections=options.max_idle_connections or DEFAULT_MAX_KEEPALIVE_CONNECTIONS,
    )


class HttpClient:
    """Sends prepared ``httpx.Request`` objects.

    Nothing is retried unless ``retry_predicate`` asks for it. Failures surface
    as ``HttpError`` subclasses carrying the URL, status, response body and
    cause.
    """

    def __init__(
        self,
        options: ClientOptions | Mapping[str, Any] | None = None,
        *,
        httpx_client: httpx.Client | None = None,
        resolver: ResponseResolver | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self.options = resolve_options(options)
        self._httpx = httpx_client or httpx.Client(
            limits=_build_limits(self.options),
            timeout=self.options.timeout,
            trust_env=False,
        )
        self._executor = RetryExecutor(
            self._httpx,
            max_retries=self.options.max_retries,
            retry_wait_min=self.options.retry_wait_min,
            retry_wait_max=self.options.retry_wait_max,
            retry_predicate=self.options.retry_predicate,
            sleep=sleep,
        )
        self._resolver = resolver or ResponseResolver(
            dump_logger=self.options.dump_logger,
            dump_body=self.options.dump_body,
        )

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._httpx.close()

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send ``request`` and return the response with its body unread.

        The caller owns the returned response and must close it.
        """
        response, _ = self._send(request, None)
        return response

    def send_and_decode_json(self, request: httpx.Request, target: type[T] | Any) -> tuple[httpx.Response, T]:
        """Send ``request`` and decode the JSON response body into ``target``.

        ``target`` is anything pydantic can validate against: a model class, a
        dataclass, or a plain type such as ``dict[str, str]``. The returned
        response is already closed.
        """
        if target is None:
            raise ValueError("target is required for JSON decoding")
        return self._send(request, target)

    def _send(self, request: httpx.Request, target: Any) -> tuple[httpx.Response, Any]:
        url = str(request.url)
        # Requests built outside httpx.Client.build_request carry no timeout of their own.
        request.extensions.setdefault("timeout", httpx.Timeout(self.options.timeout).as_dict())
        logger.debug("Sending %s %s headers=%s", request.method, url, redact_headers(request.headers))
        self._resolver.dump(request)
        outcome, attempts = self._executor.execute(request)
        logger.debug("%s %s finished after %d attempt(s)", request.method, url, attempts)
        return self._resolver.resolve(url, outcome, target)
