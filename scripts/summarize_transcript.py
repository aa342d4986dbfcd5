#!/usr/bin/env python3
"""
Dev helper: send a transcript to the local summarizer backend.

Posts either a file (multipart, field ``transcript``) or inline text (JSON
``transcriptText``) to /api/generate-summary, prints the summary, and can
then share it by email via /api/share-summary.

Usage
-----
# Inline text
python scripts/summarize_transcript.py --text "Team discussed roadmap."

# Upload a file (txt, pdf, docx, or audio)
python scripts/summarize_transcript.py --file notes/standup.docx

# Custom instruction
python scripts/summarize_transcript.py --file call.txt --prompt "List action items only."

# Email the summary afterwards
python scripts/summarize_transcript.py --file call.txt --share-to a@example.com --share-to b@example.com

# Target a different backend URL
python scripts/summarize_transcript.py --text "..." --url http://staging.example.com
"""

import argparse
import json
import mimetypes
import sys
import textwrap
from pathlib import Path

import httpx

# mimetypes does not know these on every platform
_CONTENT_TYPES = {
    ".txt": "text/plain",
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/m4a",
    ".mp4": "audio/mp4",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
}


def _detect_content_type(filename: str) -> str:
    ext = Path(filename).suffix.lower()
    return _CONTENT_TYPES.get(ext) or mimetypes.guess_type(filename)[0] or "application/octet-stream"


def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)


def _generate(args, base_url: str) -> httpx.Response:
    endpoint = f"{base_url}/api/generate-summary"

    if args.file:
        file_path = Path(args.file)
        content_type = _detect_content_type(file_path.name)
        print(f"Uploading: {file_path} ({file_path.stat().st_size:,} bytes, {content_type})")
        data = {"customPrompt": args.prompt} if args.prompt else {}
        with file_path.open("rb") as fh:
            return httpx.post(
                endpoint,
                files={"transcript": (file_path.name, fh, content_type)},
                data=data,
                timeout=args.timeout,
            )

    payload = {"transcriptText": args.text}
    if args.prompt:
        payload["customPrompt"] = args.prompt
    return httpx.post(endpoint, json=payload, timeout=args.timeout)


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="summarize_transcript.py",
        description="Send a transcript to the Meeting Notes Summarizer backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/summarize_transcript.py --text "Team discussed roadmap."
              python scripts/summarize_transcript.py --file notes.pdf
              python scripts/summarize_transcript.py --file call.mp3 --share-to me@example.com
        """),
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", metavar="PATH", help="Transcript file to upload.")
    source.add_argument("--text", help="Transcript text to send inline.")
    parser.add_argument("--prompt", default=None, help="Custom summary instruction.")
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--share-to",
        action="append",
        default=[],
        metavar="EMAIL",
        help="Email the summary to this address (repeatable).",
    )
    parser.add_argument("--subject", default=None, help="Email subject when sharing.")
    parser.add_argument("--timeout", type=float, default=120.0, help="Request timeout in seconds.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print what would be sent without contacting the backend.",
    )

    args = parser.parse_args()
    base_url = args.url.rstrip("/")

    if args.file and not Path(args.file).exists():
        print(f"ERROR: File not found: {args.file}", file=sys.stderr)
        return 1

    if args.dry_run:
        print("[DRY RUN]")
        print(f"Endpoint : {base_url}/api/generate-summary")
        print(f"Source   : {args.file or 'inline text'}")
        print(f"Prompt   : {args.prompt or '(default)'}")
        print(f"Share to : {', '.join(args.share_to) or '(none)'}")
        return 0

    try:
        response = _generate(args, base_url)
        _print_response(response)
        if response.status_code != 200:
            return 1

        if args.share_to:
            share = httpx.post(
                f"{base_url}/api/share-summary",
                json={
                    "summary": response.json()["summary"],
                    "recipients": args.share_to,
                    "subject": args.subject,
                },
                timeout=args.timeout,
            )
            _print_response(share)
            return 0 if share.status_code == 200 else 1
        return 0
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {base_url}\n"
            "Is the backend running? Start it with:\n"
            "  cd backend && uvicorn minutes.main:app --reload",
            file=sys.stderr,
        )
        return 1
    except httpx.HTTPError as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
