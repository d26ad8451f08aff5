"""Client for the Resume Parsing Service."""

from __future__ import annotations

import base64
import os
from typing import Any, Mapping

import httpx
from pydantic import ValidationError

from .exceptions import ParseDocumentError, RPSClientError
from .httpclient import HttpClient
from .models import ParseDocumentRequest, Resume
from .options import ClientOptions
from .security import normalize_base_url


class ResumeParsingServiceClient:
    """Sends resume documents to the parsing service and returns parsed data."""

    parse_path = "api/parse"

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        options: ClientOptions | Mapping[str, Any] | None = None,
        *,
        http_client: HttpClient | None = None,
        allow_http: bool = False,
        token_env_var: str = "RPS_TOKEN",
        base_url_env_var: str = "RPS_BASE_URL",
    ) -> None:
        self.token = token or os.getenv(token_env_var) or ""
        resolved_base_url = base_url or os.getenv(base_url_env_var)
        if not resolved_base_url:
            raise ValueError(f"base_url is required (pass it or set {base_url_env_var})")
        self.base_url = normalize_base_url(resolved_base_url, allow_http=allow_http)
        self.http_client = http_client or HttpClient(options)

    def __enter__(self) -> "ResumeParsingServiceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.http_client.close()

    def parse_document(self, file_contents: bytes) -> Resume:
        url = f"{self.base_url}/{self.parse_path}"
        try:
            payload = ParseDocumentRequest(
                base64_data=base64.b64encode(file_contents).decode("ascii"),
            ).model_dump_json()
        except (TypeError, ValidationError) as exc:
            raise ParseDocumentError("marshalling parse document request", exc) from exc

        try:
            request = httpx.Request(
                "POST",
                url,
                content=payload.encode(),
                headers={"Content-Type": "application/json", "token": self.token},
            )
        except httpx.InvalidURL as exc:
            raise ParseDocumentError("creating request", exc) from exc

        try:
            _, resume = self.http_client.send_and_decode_json(request, Resume)
        except RPSClientError as exc:
            raise ParseDocumentError("performing request", exc) from exc
        return resume
