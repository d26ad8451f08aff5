"""Command line entry point for parsing a resume file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .exceptions import RPSClientError
from .options import ClientOptions
from .retry import retry_on_status
from .rps import ResumeParsingServiceClient
from .security import redact_dump

logger = logging.getLogger(__name__)


def _log_dump(dump: bytes) -> None:
    logger.info("dump: %s", redact_dump(dump).decode("utf-8", errors="replace"))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rps-parse", description="Send a resume to the Resume Parsing Service.")
    parser.add_argument("file", type=Path)
    parser.add_argument("--token", default=None, help="API token (defaults to $RPS_TOKEN)")
    parser.add_argument("--base-url", default=None, help="service URL (defaults to $RPS_BASE_URL)")
    parser.add_argument("--allow-http", action="store_true")
    parser.add_argument("--max-retries", type=int, default=0)
    parser.add_argument("--retry-wait-min", type=float, default=1.0)
    parser.add_argument("--retry-wait-max", type=float, default=30.0)
    parser.add_argument(
        "--retry-on-status",
        type=int,
        nargs="+",
        default=[],
        metavar="CODE",
        help="status codes worth another attempt",
    )
    parser.add_argument("--timeout", type=float, default=30.0)
    parser.add_argument("--dump-requests", action="store_true")
    parser.add_argument("--dump-body", action="store_true")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def _main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        contents = args.file.read_bytes()
    except OSError as exc:
        print(f'error when reading file "{args.file}": {exc}', file=sys.stderr)
        return 1

    try:
        options = ClientOptions(
            max_retries=args.max_retries,
            retry_wait_min=args.retry_wait_min,
            retry_wait_max=args.retry_wait_max,
            retry_predicate=retry_on_status(*args.retry_on_status) if args.retry_on_status else None,
            dump_logger=_log_dump if args.dump_requests else None,
            dump_body=args.dump_body,
            timeout=args.timeout,
        )
        client = ResumeParsingServiceClient(
            args.token,
            args.base_url,
            options,
            allow_http=args.allow_http,
        )
    except ValueError as exc:
        print(f"invalid configuration: {exc}", file=sys.stderr)
        return 1

    with client:
        try:
            resume = client.parse_document(contents)
        except RPSClientError as exc:
            print(f'error when uploading file "{args.file}": {exc}', file=sys.stderr)
            return 1

    print(resume.model_dump_json(indent=2))
    return 0


def main() -> None:
    raise SystemExit(_main())
