"""HTTP client with opt-in retries and a Resume Parsing Service client built on it."""

from .exceptions import (
    BodyNotReplayableError,
    BodyReadError,
    GivingUpError,
    HttpError,
    ParseDocumentError,
    ResponseDecodeError,
    RPSClientError,
    TransportFailureError,
    UnsuccessfulResponseError,
)
from .httpclient import HttpClient
from .models import Education, Location, PhoneNumber, Position, Resume, Skill, SocialUrl
from .options import ClientOptions
from .resolver import ResponseResolver
from .retry import (
    AttemptOutcome,
    RetryDecision,
    RetryExecutor,
    do_not_retry,
    retry_on_status,
    retry_on_transport_error,
)
from .rps import ResumeParsingServiceClient

__all__ = [
    "AttemptOutcome",
    "BodyNotReplayableError",
    "BodyReadError",
    "ClientOptions",
    "Education",
    "GivingUpError",
    "HttpClient",
    "HttpError",
    "Location",
    "ParseDocumentError",
    "PhoneNumber",
    "Position",
    "RPSClientError",
    "ResponseDecodeError",
    "ResponseResolver",
    "Resume",
    "ResumeParsingServiceClient",
    "RetryDecision",
    "RetryExecutor",
    "Skill",
    "SocialUrl",
    "TransportFailureError",
    "UnsuccessfulResponseError",
    "do_not_retry",
    "retry_on_status",
    "retry_on_transport_error",
]

__version__ = "0.1.0"
