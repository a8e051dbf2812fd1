"""Brief and draft records client (DynamoDB)."""

import uuid

import boto3
from boto3.dynamodb.conditions import Key

from ..config import Settings
from ..models import Brief, Draft
from ..utils import utc_now_iso


class RecordsClient:
    """Read briefs and append drafts.

    Drafts are insert-only: regeneration writes a new item and history is
    never rewritten.
    """

    def __init__(
        self,
        briefs_table: str,
        drafts_table: str,
        drafts_by_brief_index: str = "briefId-createdAt-index",
        region: str = "us-east-1",
        dynamodb=None,
    ):
        dynamodb = dynamodb or boto3.resource("dynamodb", region_name=region)
        self.briefs = dynamodb.Table(briefs_table)
        self.drafts = dynamodb.Table(drafts_table)
        self.drafts_by_brief_index = drafts_by_brief_index

    @classmethod
    def from_settings(cls, settings: Settings) -> "RecordsClient":
        return cls(
            briefs_table=settings.briefs_table,
            drafts_table=settings.drafts_table,
            drafts_by_brief_index=settings.drafts_by_brief_index,
            region=settings.aws_region,
        )

    def get_brief(self, brief_id: str) -> Brief | None:
        item = self.briefs.get_item(Key={"id": brief_id}).get("Item")
        return Brief.from_dict(item) if item else None

    def create_brief(
        self,
        project_id: str,
        intent_text: str,
        brief_json: dict,
        constraints: dict,
    ) -> Brief:
        brief = Brief(
            id=str(uuid.uuid4()),
            project_id=project_id,
            intent_text=intent_text,
            brief_json=brief_json,
            constraints=constraints,
        )
        self.briefs.put_item(Item=brief.to_dict())
        return brief

    def create_draft(self, brief_id: str, draft_json: dict) -> Draft:
        draft = Draft(
            id=str(uuid.uuid4()),
            brief_id=brief_id,
            draft_json=draft_json,
            created_at=utc_now_iso(),
        )
        self.drafts.put_item(
            Item=draft.to_dict(),
            ConditionExpression="attribute_not_exists(id)",
        )
        return draft

    def list_drafts(self, brief_id: str) -> list[Draft]:
        """All drafts of a brief, newest first."""
        drafts = []
        kwargs = {
            "IndexName": self.drafts_by_brief_index,
            "KeyConditionExpression": Key("briefId").eq(brief_id),
            "ScanIndexForward": False,
        }
        while True:
            response = self.drafts.query(**kwargs)
            drafts.extend(Draft.from_dict(item) for item in response.get("Items", []))
            if "LastEvaluatedKey" not in response:
                return drafts
            kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
