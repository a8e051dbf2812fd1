"""AWS Lambda handlers for creative generation and draft history."""

import json
import logging

from ..clients import ImageClient, RecordsClient, StorageClient
from ..config import Settings
from ..errors import PipelineError
from ..models import CreativeRequest
from ..services import CreativeService
from ..utils import configure_logging, error_response, json_response, parse_body, path_param

logger = logging.getLogger(__name__)


def _build_service(settings: Settings) -> CreativeService:
    return CreativeService(
        image=ImageClient.from_settings(settings),
        storage=StorageClient.from_settings(settings),
        records=RecordsClient.from_settings(settings),
        settings=settings,
    )


def _is_retryable(error: Exception) -> bool:
    """Client errors (bad message, unknown brief) fail the same way on redelivery."""
    return not (isinstance(error, PipelineError) and error.status_code < 500)


def _generate(service: CreativeService, body: dict) -> dict:
    request = CreativeRequest.from_body(body)
    logger.info(f"Processing brief {request.brief_id} for placement {request.placement}")
    result = service.generate(request.brief_id, request.placement, request.brand_assets)
    return result.to_dict()


def _handle_records(records: list[dict], service: CreativeService | None) -> dict:
    """Process every SQS record; failed ones are returned for redelivery."""
    failures = []

    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        service = service or _build_service(settings)
    except Exception as e:
        logger.error(f"Creative worker setup failed: {e}")
        return {"batchItemFailures": [{"itemIdentifier": r.get("messageId")} for r in records]}

    for record in records:
        message_id = record.get("messageId")
        try:
            _generate(service, parse_body({"body": record.get("body")}))
        except Exception as e:
            logger.error(f"Creative generation failed for message {message_id}: {e}")
            if _is_retryable(e):
                failures.append({"itemIdentifier": message_id})

    logger.info(f"Processed {len(records)} message(s), {len(failures)} to retry")
    return {"batchItemFailures": failures}


def generate_handler(event, context, service: CreativeService | None = None):
    """
    AWS Lambda handler - triggered by SQS or HTTP.

    Input payload:
    {
        "briefId": "8c1f...",
        "placement": "story_9_16",
        "brandAssets": [{"kind": "logo", "mimeType": "image/png", "dataBase64": "..."}]
    }

    HTTP output: {"image": {imageUrl, aspectRatio}, "draft": {...}} or {error, code}.
    SQS output: {"batchItemFailures": [{"itemIdentifier": messageId}, ...]} with one
    entry per record that failed with a server-side error.
    """
    # Handle SQS event format
    if "Records" in event:
        return _handle_records(event["Records"], service)

    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        service = service or _build_service(settings)
        return json_response(200, _generate(service, parse_body(event)))

    except Exception as e:
        logger.error(f"Creative generation failed: {e}")
        return error_response(e)


def list_drafts_handler(event, context, records: RecordsClient | None = None):
    """
    GET /briefs/{briefId}/drafts

    Output: {"drafts": [...]} newest first. Regenerations never replace history.
    """
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        brief_id = path_param(event, "briefId")
        records = records or RecordsClient.from_settings(settings)
        drafts = records.list_drafts(brief_id)
    except Exception as e:
        logger.error(f"Listing drafts failed: {e}")
        return error_response(e)

    return json_response(200, {"drafts": [d.to_dict() for d in drafts]})


# Local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("Usage: python -m creative_store.handlers.creative <brief_id> <placement>")
        print()
        print("Example:")
        print("  python -m creative_store.handlers.creative 8c1f0d9e-... story_9_16")
        sys.exit(1)

    test_input = {"briefId": sys.argv[1], "placement": sys.argv[2]}
    print("Running with input:")
    print(json.dumps(test_input, indent=2))
    print()

    result = generate_handler({"body": json.dumps(test_input)}, None)
    print(f"\nResult ({result['statusCode']}):")
    print(json.dumps(json.loads(result["body"]), indent=2))
