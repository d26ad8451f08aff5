"""Retry loop around single httpx exchanges.

The stock policy never retries. Callers opt in by supplying a retry predicate,
which is asked after every attempt whether another one should be made.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, NamedTuple

import httpx
from tenacity import RetryCallState, Retrying, before_sleep_log, retry_if_result, stop_after_attempt, wait_exponential

from .exceptions import BodyNotReplayableError, GivingUpError

logger = logging.getLogger(__name__)


class RetryDecision(NamedTuple):
    should_retry: bool
    error: BaseException | None = None


RetryPredicate = Callable[
    [httpx.Request, httpx.Response | None, BaseException | None],
    RetryDecision | tuple[bool, BaseException | None],
]


@dataclass
class AttemptOutcome:
    """What one attempt produced.

    The response, when present, was sent with ``stream=True`` and its body has
    not been read yet.
    """

    response: httpx.Response | None = None
    error: BaseException | None = None
    retry: bool = False


def do_not_retry(
    request: httpx.Request,
    response: httpx.Response | None,
    error: BaseException | None,
) -> RetryDecision:
    """Default predicate: stop after the first attempt, whatever happened."""
    return RetryDecision(False, None)


def retry_on_status(*status_codes: int) -> RetryPredicate:
    """Retry when the response carries one of ``status_codes``."""
    codes = frozenset(status_codes)

    def predicate(
        request: httpx.Request,
        response: httpx.Response | None,
        error: BaseException | None,
    ) -> RetryDecision:
        if response is not None and response.status_code in codes:
            return RetryDecision(True, error)
        return RetryDecision(False, error)

    return predicate


def retry_on_transport_error(
    *error_types: type[BaseException],
) -> RetryPredicate:
    """Retry when the attempt failed with one of ``error_types`` (any httpx transport error by default)."""
    types = error_types or (httpx.TransportError,)

    def predicate(
        request: httpx.Request,
        response: httpx.Response | None,
        error: BaseException | None,
    ) -> RetryDecision:
        return RetryDecision(isinstance(error, types), error)

    return predicate


def is_replayable(request: httpx.Request) -> bool:
    return isinstance(request.stream, httpx.ByteStream)


def release_response(response: httpx.Response) -> None:
    """Drain and close a response body nobody else is going to read."""
    try:
        response.read()
    except (httpx.HTTPError, httpx.StreamError) as exc:
        logger.debug("Discarding unreadable response body: %s", exc)
    finally:
        response.close()


class RetryExecutor:
    def __init__(
        self,
        client: httpx.Client,
        *,
        max_retries: int = 0,
        retry_wait_min: float = 1.0,
        retry_wait_max: float = 30.0,
        retry_predicate: RetryPredicate = do_not_retry,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self._client = client
        self.max_retries = max_retries
        self.retry_wait_min = retry_wait_min
        self.retry_wait_max = retry_wait_max
        self.retry_predicate = retry_predicate
        self._sleep = sleep or time.sleep

    def execute(self, request: httpx.Request) -> tuple[AttemptOutcome, int]:
        """Run attempts until the predicate stops or retries run out.

        Returns the final outcome and the number of attempts made. Transport
        errors are carried on the outcome, never raised.
        """
        attempts = 0

        def attempt() -> AttemptOutcome:
            nonlocal attempts
            attempts += 1
            if attempts > 1 and not is_replayable(request):
                return AttemptOutcome(error=BodyNotReplayableError(request.method, str(request.url)))
            logger.debug("%s %s attempt %d", request.method, request.url, attempts)
            return self._attempt(request)

        def give_up(retry_state: RetryCallState) -> AttemptOutcome:
            last = retry_state.outcome.result()
            if last.response is not None:
                release_response(last.response)
            error = GivingUpError(request.method, str(request.url), attempts, last.error)
            error.__cause__ = last.error
            return AttemptOutcome(error=error)

        retrying = Retrying(
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(
                multiplier=self.retry_wait_min,
                min=self.retry_wait_min,
                max=self.retry_wait_max,
            ),
            retry=retry_if_result(lambda outcome: outcome.retry),
            before_sleep=self._before_sleep,
            retry_error_callback=give_up,
            sleep=self._sleep,
        )
        outcome = retrying(attempt)
        return outcome, attempts

    def _attempt(self, request: httpx.Request) -> AttemptOutcome:
        response: httpx.Response | None = None
        error: BaseException | None = None
        try:
            response = self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            error = exc
        try:
            should_retry, check_error = self.retry_predicate(request, response, error)
        except Exception:
            if response is not None:
                response.close()
            raise
        if check_error is not None:
            error = check_error
        return AttemptOutcome(response=response, error=error, retry=bool(should_retry))

    @staticmethod
    def _before_sleep(retry_state: RetryCallState) -> None:
        previous = retry_state.outcome.result()
        if previous.response is not None:
            release_response(previous.response)
        before_sleep_log(logger, logging.WARNING)(retry_state)
