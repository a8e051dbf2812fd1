"""AWS Lambda handler for HTTP to SQS enqueue."""

import json
import logging

import boto3

from ..clients import RecordsClient
from ..config import Settings
from ..errors import NotFoundError, ValidationError
from ..placements import PLACEMENT_KEYS
from ..utils import configure_logging, error_response, json_response, parse_body, path_param

logger = logging.getLogger(__name__)


def handler(event, context, sqs=None, records: RecordsClient | None = None):
    """
    POST /briefs/{briefId}/generate-drafts

    Queues one generation message per placement for async processing.
    Placements come from the body, else from the brief's constraints.
    Brand assets are not queued; queued renders use the brief alone.
    """
    try:
        settings = Settings.from_env()
        configure_logging(settings.log_level)
        brief_id = path_param(event, "briefId")
        body = parse_body(event)

        placements = body.get("placements")
        if placements is None:
            records = records or RecordsClient.from_settings(settings)
            brief = records.get_brief(brief_id)
            if brief is None:
                raise NotFoundError(f"Brief not found: {brief_id}")
            placements = brief.constraints.get("placements") or []

        if not isinstance(placements, list) or not placements:
            raise ValidationError("No placements to generate")
        unknown = [p for p in placements if p not in PLACEMENT_KEYS]
        if unknown:
            raise ValidationError(f"Unknown placement(s): {', '.join(map(str, unknown))}")
        if not settings.queue_url:
            raise ValidationError("QUEUE_URL is not configured")

        sqs = sqs or boto3.client("sqs", region_name=settings.aws_region)
        message_ids = []
        for placement in placements:
            response = sqs.send_message(
                QueueUrl=settings.queue_url,
                MessageBody=json.dumps({"briefId": brief_id, "placement": placement}),
            )
            message_ids.append(response["MessageId"])
    except Exception as e:
        logger.error(f"Enqueue failed: {e}")
        return error_response(e)

    logger.info(f"Queued {len(message_ids)} placement(s) for brief {brief_id}")
    return json_response(200, {"status": "queued", "briefId": brief_id, "messageIds": message_ids})
