"""Construction-time options for the HTTP client."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Mapping

from .retry import RetryPredicate, do_not_retry

DumpLogger = Callable[[bytes], None]


@dataclass(frozen=True)
class ClientOptions:
    max_idle_connections: int = 0
    max_idle_connections_per_host: int = 0
    max_connections_per_host: int = 0
    max_retries: int = 0
    retry_wait_min: float = 1.0
    retry_wait_max: float = 30.0
    retry_predicate: RetryPredicate = do_not_retry
    dump_logger: DumpLogger | None = None
    dump_body: bool = False
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.retry_predicate is None:
            object.__setattr__(self, "retry_predicate", do_not_retry)
        for name in (
            "max_idle_connections",
            "max_idle_connections_per_host",
            "max_connections_per_host",
            "max_retries",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.retry_wait_min < 0 or self.retry_wait_max < 0:
            raise ValueError("retry waits must be non-negative")
        if self.retry_wait_min > self.retry_wait_max:
            raise ValueError("retry_wait_min must not exceed retry_wait_max")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than 0")

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None) -> "ClientOptions":
        """Build options from a mapping, rejecting keys that are not recognised."""
        if not options:
            return cls()
        known = {field.name for field in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown client options: {', '.join(unknown)}")
        return cls(**dict(options))


def resolve_options(options: ClientOptions | Mapping[str, Any] | None) -> ClientOptions:
    if isinstance(options, ClientOptions):
        return options
    return ClientOptions.from_mapping(options)
