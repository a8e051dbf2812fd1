import base64
import json
import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from .errors import PipelineError, ValidationError

PROMPTS_DIR = Path(__file__).parent / "prompts"


def configure_logging(level: str = "INFO") -> None:
    """Set the root log level (Lambda installs its own handler)."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root.setLevel(level)


def now_millis() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * 1000)


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601, e.g. 2026-01-31T12:00:00.000000+00:00."""
    return datetime.now(timezone.utc).isoformat()


def json_response(status_code: int, body: dict) -> dict:
    """Build a Lambda proxy response."""
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def error_response(error: Exception) -> dict:
    """Classify an exception into the ``{error, code}`` response shape."""
    if isinstance(error, PipelineError):
        return json_response(error.status_code, error.to_dict())
    return json_response(500, {"error": str(error), "code": "AI_ERROR"})


def parse_body(event: dict) -> dict:
    """Extract the JSON body from an HTTP or SQS event."""
    # Handle SQS event format
    if "Records" in event:
        raw = event["Records"][0]["body"]
    else:
        raw = event.get("body") or "{}"
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw).decode("utf-8")

    try:
        body = json.loads(raw) if isinstance(raw, str) else raw
    except json.JSONDecodeError as e:
        raise ValidationError(f"Request body must be valid JSON: {e}")

    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def path_param(event: dict, name: str) -> str:
    """Read a required path parameter."""
    value = (event.get("pathParameters") or {}).get(name)
    if not value:
        raise ValidationError(f"Missing path parameter '{name}'")
    return value


def load_prompt(name: str) -> str:
    """Load a system prompt from the prompts directory."""
    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt file not found: {path}")
    return path.read_text(encoding="utf-8").strip()
