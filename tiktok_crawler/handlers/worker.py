"""Event handler for product extraction (text import or simulated URL crawl)."""

import json
import logging
from dataclasses import fields

from ..clients import GeminiClient
from ..config import EXPORT_DIR, GEMINI_API_KEY, GEMINI_MODEL, GEMINI_TIMEOUT_SECONDS, LOG_LEVEL
from ..models import CrawlOptions, FilterConfig
from ..services import (
    EmptyInputError,
    ExportError,
    ExtractionService,
    ExtractionServiceError,
    IngestionService,
)

MODES = ("text", "url")
OPTION_KEYS = {f.name for f in fields(CrawlOptions)}


class PayloadError(ValueError):
    """Raised when the event payload is not a usable request."""


def build_service() -> IngestionService:
    """Wire clients and services from config."""
    gemini = GeminiClient(api_key=GEMINI_API_KEY, model=GEMINI_MODEL, timeout=GEMINI_TIMEOUT_SECONDS)
    return IngestionService(ExtractionService(gemini))


def _parse_body(event) -> dict:
    try:
        # SQS event format
        if "Records" in event:
            body = json.loads(event["Records"][0]["body"])
        elif "body" in event:
            body = event["body"]
            body = json.loads(body) if isinstance(body, str) else (body or {})
        else:
            body = event
    except (TypeError, KeyError, IndexError, ValueError) as e:
        raise PayloadError(f"Malformed event body: {e}") from e
    if not isinstance(body, dict):
        raise PayloadError("Event body must be a JSON object")
    return body


def _validate(body: dict):
    """Check field types; filters/options may be absent or null."""
    for key in ("source", "search", "export", "export_dir"):
        if body.get(key) is not None and not isinstance(body[key], str):
            raise PayloadError(f"'{key}' must be a string")
    for key in ("filters", "options"):
        if body.get(key) is not None and not isinstance(body[key], dict):
            raise PayloadError(f"'{key}' must be an object")
    unknown = set(body.get("options") or {}) - OPTION_KEYS
    if unknown:
        raise PayloadError(f"Unknown options {sorted(unknown)}. Valid: {sorted(OPTION_KEYS)}")


def _response(status_code: int, payload: dict) -> dict:
    return {
        "statusCode": status_code,
        "body": json.dumps(payload, ensure_ascii=False),
    }


def handler(event, context):
    """
    Extract products and return the batch, the filtered view and catalog stats.

    Input payload:
    {
        "mode": "url",                      # "text" or "url"
        "source": "https://www.tiktok.com/@fashionnova",
        "filters": {"category": "女装服饰", "minPrice": "10", "maxPrice": "", "minSales": ""},
        "search": "",
        "export": "csv",                    # optional: csv | xlsx | json
        "export_dir": "./exports",          # optional
        "options": {"stealth_mode": true, "auto_captcha": true}   # url mode only
    }
    """
    try:
        body = _parse_body(event)
        _validate(body)
    except PayloadError as e:
        return _response(400, {"error": str(e)})

    mode = body.get("mode", "text")
    if mode not in MODES:
        return _response(400, {"error": f"Invalid mode {mode!r}. Valid: {list(MODES)}"})

    filters = FilterConfig.from_dict(body.get("filters"))
    search = body.get("search") or ""
    source = body.get("source") or ""

    try:
        service = build_service()
        print(f"Processing {mode} extraction...", flush=True)
        if mode == "url":
            options = CrawlOptions(**(body.get("options") or {}))
            records = service.ingest_url(source, filters, options)
        else:
            records = service.ingest_text(source, filters)
        print(f"Extracted {len(records)} products", flush=True)

        export_path = None
        if body.get("export"):
            export_path = service.export(body["export"], body.get("export_dir") or EXPORT_DIR, filters, search)
            print(f"Exported to {export_path}", flush=True)

        visible = service.view(filters, search)
        return _response(200, {
            "mode": mode,
            "extracted": len(records),
            "records": [r.to_dict() for r in records],
            "visible": [r.to_dict() for r in visible],
            "stats": service.stats().to_dict(),
            "export": str(export_path) if export_path else None,
            "logs": [f"[{e.level}] {e.message}" for e in service.crawler.logs] if mode == "url" else [],
        })

    except EmptyInputError as e:
        return _response(400, {"error": str(e)})
    except ExtractionServiceError as e:
        print(f"ERROR ({e.mode.value}): {e}", flush=True)
        return _response(502, {"error": str(e), "mode": e.mode.value})
    except ExportError as e:
        print(f"EXPORT ERROR: {e}", flush=True)
        return _response(500, {"error": str(e)})
    except Exception as e:
        print(f"ERROR: {e}", flush=True)
        return _response(500, {"error": str(e)})


# Local testing
if __name__ == "__main__":
    import sys

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if len(sys.argv) < 3:
        print("Usage: python -m tiktok_crawler.handlers.worker <mode> <source> [extra_json]")
        print()
        print("Arguments:")
        print("  mode       - text | url")
        print("  source     - pasted product text, or a target URL to simulate")
        print("  extra_json - JSON object with optional fields:")
        print("               {\"filters\": {...}, \"search\": \"...\", \"export\": \"csv\"}")
        print()
        print("Example:")
        print('  python -m tiktok_crawler.handlers.worker url "https://www.tiktok.com/@fashionnova" \'{"export": "xlsx"}\'')
        sys.exit(1)

    test_input = {"mode": sys.argv[1], "source": sys.argv[2]}
    if len(sys.argv) > 3:
        test_input.update(json.loads(sys.argv[3]))

    print("Running with input:")
    print(json.dumps(test_input, indent=2, ensure_ascii=False))
    print()

    result = handler({"body": json.dumps(test_input)}, None)
    print("\nResult:")
    print(json.dumps(json.loads(result["body"]), indent=2, ensure_ascii=False))
