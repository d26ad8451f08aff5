from __future__ import annotations

import base64
import json
from datetime import datetime, timezone

import httpx
import pytest

import rps_client.rps as rps
from rps_client import HttpClient, ParseDocumentError, ResumeParsingServiceClient, UnsuccessfulResponseError
from rps_client.models import Location

BASE_URL = "https://rps.example.com"

RESUME_BODY = {
    "first_name": "Morgana",
    "middle_name": "",
    "last_name": "Favero",
    "summary": "I am a Neuroscientist...",
    "pdf": "pdf location",
    "location": {
        "formatted": "3850 Woodhaven Road, Philadelphia, PA, USA",
        "street": "Woodhaven Road",
        "city": "Philadelphia",
        "state": "Pennsylvania",
        "country": "United States",
        "countryCode": "US",
    },
    "emails": ["favero.morgana@example.com"],
    "profession": "Postdoctoral Researcher",
    "positions": [
        {
            "title": "Assistant Professor",
            "title_normalized": "Assistant Professor",
            "organization": "University of Verona",
            "start_date": "2013-03-01T00:00:00Z",
            "end_date": "2015-10-01T00:00:00Z",
            "description": "description",
            "location": {"formatted": "Verona, VR, Italy", "city": "Verona", "countryCode": "IT"},
            "management_level": "Low",
        }
    ],
    "educations": [
        {
            "organization": "University of Padova",
            "degree": "MD, Medicine and Surgery",
            "start_date": "1995-01-01T00:00:00Z",
            "end_date": None,
            "location": {"city": "Padova", "countryCode": "IT"},
            "education_level": "",
        }
    ],
    "social_urls": [],
    "phone_numbers": [{"country_code": "+1", "country_name": "US", "national_number": "(267) 555-0100"}],
    "languages": ["French", "English", "Italian"],
    "detected_language": "en",
    "skills": [{"name": "Research", "num_months": 80}],
    "raw_text": "MORGANA FAVERO, MD, PhD...",
}


def _rps_client(handler) -> ResumeParsingServiceClient:
    http_client = HttpClient(httpx_client=httpx.Client(transport=httpx.MockTransport(handler)))
    return ResumeParsingServiceClient("TOKEN", BASE_URL, http_client=http_client)


def test_parse_document_sends_encoded_file_and_decodes_resume() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["url"] = str(request.url)
        captured["headers"] = request.headers
        captured["body"] = json.loads(request.content.decode())
        return httpx.Response(200, json=RESUME_BODY)

    with _rps_client(handler) as client:
        resume = client.parse_document(b"resume bytes")

    assert captured["method"] == "POST"
    assert captured["url"] == f"{BASE_URL}/api/parse"
    assert captured["headers"]["token"] == "TOKEN"
    assert captured["headers"]["content-type"] == "application/json"
    assert captured["body"] == {"base64_data": base64.b64encode(b"resume bytes").decode()}

    assert resume.first_name == "Morgana"
    assert resume.location.country_code == "US"
    assert resume.positions[0].start_date == datetime(2013, 3, 1, tzinfo=timezone.utc)
    assert resume.positions[0].location.city == "Verona"
    assert resume.educations[0].end_date is None
    assert resume.phone_numbers[0].national_number == "(267) 555-0100"
    assert resume.skills[0].num_months == 80
    assert resume.social_urls == []


def test_parse_document_wraps_request_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text='{"error":"boom"}')

    with _rps_client(handler) as client:
        with pytest.raises(ParseDocumentError) as excinfo:
            client.parse_document(b"resume bytes")

    assert str(excinfo.value) == (
        f"performing request: request to {BASE_URL}/api/parse failed. "
        'httpStatus: [ 500 ] responseBody: [ {"error":"boom"} ] error: [ <nil> ]'
    )
    assert isinstance(excinfo.value.cause, UnsuccessfulResponseError)


def test_parse_document_wraps_marshalling_failures(monkeypatch) -> None:
    def broken_request(**kwargs: object) -> object:
        raise TypeError("marshalling error")

    monkeypatch.setattr(rps, "ParseDocumentRequest", broken_request)

    with _rps_client(lambda request: httpx.Response(200, json={})) as client:
        with pytest.raises(ParseDocumentError, match="^marshalling parse document request: marshalling error$"):
            client.parse_document(b"")


def test_parse_document_wraps_request_creation_failures(monkeypatch) -> None:
    def broken_request(*args: object, **kwargs: object) -> httpx.Request:
        raise httpx.InvalidURL("create request error")

    with _rps_client(lambda request: httpx.Response(200, json={})) as client:
        monkeypatch.setattr(rps.httpx, "Request", broken_request)
        with pytest.raises(ParseDocumentError, match="^creating request: create request error$"):
            client.parse_document(b"")


def test_client_reads_token_and_base_url_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("RPS_TOKEN", "env-token")
    monkeypatch.setenv("RPS_BASE_URL", "https://env.example.com/")

    with ResumeParsingServiceClient(options={"max_retries": 2}) as client:
        assert client.token == "env-token"
        assert client.base_url == "https://env.example.com"
        assert client.http_client.options.max_retries == 2


def test_client_requires_base_url(monkeypatch) -> None:
    monkeypatch.delenv("RPS_BASE_URL", raising=False)
    with pytest.raises(ValueError, match="base_url is required"):
        ResumeParsingServiceClient("TOKEN")


def test_client_rejects_plain_http_for_remote_hosts() -> None:
    with pytest.raises(ValueError, match="Non-HTTPS base_url"):
        ResumeParsingServiceClient("TOKEN", "http://rps.example.com")

    client = ResumeParsingServiceClient("TOKEN", "http://rps.example.com", allow_http=True)
    client.close()


def test_parse_document_treats_null_fields_as_empty() -> None:
    body = {
        "first_name": "A",
        "middle_name": None,
        "location": None,
        "emails": None,
        "social_urls": None,
        "positions": [{"title": None, "start_date": None, "location": None}],
        "skills": [{"name": "Research", "num_months": None}],
    }

    with _rps_client(lambda request: httpx.Response(200, json=body)) as client:
        resume = client.parse_document(b"resume bytes")

    assert resume.first_name == "A"
    assert resume.middle_name == ""
    assert resume.location == Location()
    assert resume.emails == []
    assert resume.social_urls == []
    assert resume.positions[0].title == ""
    assert resume.positions[0].start_date is None
    assert resume.positions[0].location.city == ""
    assert resume.skills[0].num_months == 0


def test_client_strips_trailing_slash_from_base_url() -> None:
    with ResumeParsingServiceClient("TOKEN", "https://rps.example.com/") as client:
        assert client.base_url == BASE_URL
