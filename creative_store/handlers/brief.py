"""AWS Lambda handlers for brief intelligence.

Two callers share one BriefService with different failure tolerance:
``parse_handler`` (diagnostic preview) surfaces AI failures, while
``create_handler`` (project flow) degrades to the deterministic brief.
"""

import json
import logging
from typing import Callable

from ..clients import LLMClient, RecordsClient
from ..config import Settings
from ..models import BriefParseResult, BriefRequest
from ..services import BriefService, build_brief_json
from ..utils import configure_logging, error_response, json_response, parse_body, path_param

logger = logging.getLogger(__name__)


def parse_strict(service: BriefService, request: BriefRequest) -> BriefParseResult:
    """Diagnostic policy: every pipeline failure propagates."""
    return service.parse(request)


def parse_best_effort(get_service: Callable[[], BriefService], request: BriefRequest) -> dict:
    """Best-effort policy: any pipeline failure yields the deterministic briefJson.

    The service is built inside the guard, so a client that cannot be
    constructed degrades the same way as a failed AI call.
    """
    try:
        return get_service().parse(request).brief_json
    except Exception as e:
        logger.error(f"AI brief parsing failed, using deterministic brief: {e}")
        return build_brief_json(
            request.intent_text,
            industry=request.industry,
            placements=request.placements,
            sensitive_words=request.sensitive_words,
        )


def _build_service(settings: Settings) -> BriefService:
    return BriefService(LLMClient.from_settings(settings), settings)


def parse_handler(event, context, service: BriefService | None = None):
    """
    POST /ai/brief/parse

    Input: {"intentText": "...", "industry": "...", "placements": [...], "sensitiveWords": [...]}
    Output: {briefJson, researchSummary, sources, stepCount, warnings} or {error, code}.
    """
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        request = BriefRequest.from_body(parse_body(event))
        service = service or _build_service(settings)
        result = parse_strict(service, request)
        return json_response(200, result.to_dict())
    except Exception as e:
        logger.error(f"Brief parse failed: {e}")
        return error_response(e)


def create_handler(
    event,
    context,
    service: BriefService | None = None,
    records: RecordsClient | None = None,
):
    """
    POST /projects/{projectId}/briefs

    Creates the brief even when brief intelligence is unavailable.
    Output: {"brief": {...}}
    """
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        project_id = path_param(event, "projectId")
        request = BriefRequest.from_body(parse_body(event))
    except Exception as e:
        logger.error(f"Brief request rejected: {e}")
        return error_response(e)

    brief_json = parse_best_effort(lambda: service or _build_service(settings), request)

    try:
        records = records or RecordsClient.from_settings(settings)
        brief = records.create_brief(
            project_id=project_id,
            intent_text=request.intent_text,
            brief_json=brief_json,
            constraints={"placements": list(request.placements)},
        )
    except Exception as e:
        logger.error(f"Failed to store brief: {e}")
        return error_response(e)

    logger.info(f"Brief {brief.id} created for project {project_id}")
    return json_response(200, {"brief": brief.to_dict()})


# Local testing
if __name__ == "__main__":
    import sys

    if len(sys.argv) < 3:
        print("Usage: python -m creative_store.handlers.brief <intent_text> <placement> [placement ...]")
        print()
        print("Example:")
        print('  python -m creative_store.handlers.brief "Launch a sale for eco-friendly sneakers" square_1_1')
        sys.exit(1)

    test_input = {"intentText": sys.argv[1], "placements": sys.argv[2:]}
    print("Running with input:")
    print(json.dumps(test_input, indent=2))
    print()

    result = parse_handler({"body": json.dumps(test_input)}, None)
    print(f"\nResult ({result['statusCode']}):")
    print(json.dumps(json.loads(result["body"]), indent=2))
