"""Brief models - stored record and structured extraction schema."""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@dataclass
class Brief:
    """Structured marketing intent for one campaign description."""

    id: str
    project_id: str
    intent_text: str
    brief_json: dict[str, Any] = field(default_factory=dict)
    constraints: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "projectId": self.project_id,
            "intentText": self.intent_text,
            "briefJson": self.brief_json,
            "constraints": self.constraints,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Brief":
        return cls(
            id=data["id"],
            project_id=data.get("projectId", ""),
            intent_text=data.get("intentText", ""),
            brief_json=data.get("briefJson") or {},
            constraints=data.get("constraints") or {},
        )


# ===== Extraction schema =====
# Every field is optional so the model can leave out what research does not
# support; absent fields are dropped from briefJson rather than defaulted.


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AudienceSchema(_Schema):
    age_range: Optional[str] = None
    geo: Optional[str] = None
    interests: Optional[list[str]] = None


class StyleSchema(_Schema):
    tone: Optional[str] = None
    keywords: Optional[list[str]] = None
    references: Optional[list[str]] = None


class ComplianceSchema(_Schema):
    sensitive_words: Optional[list[str]] = None
    notes: Optional[str] = None


class BriefSchema(_Schema):
    """Output contract for the extraction call."""

    industry: Optional[str] = None
    objective: Optional[str] = None
    placements: Optional[list[str]] = None
    audience: Optional[AudienceSchema] = None
    key_benefits: Optional[list[str]] = None
    cta: Optional[str] = None
    style: Optional[StyleSchema] = None
    compliance: Optional[ComplianceSchema] = None
    proposed_hook: Optional[str] = None

    def to_brief_json(self) -> dict[str, Any]:
        """Dump in camelCase, omitting fields the model did not answer."""
        return self.model_dump(by_alias=True, exclude_none=True)
