"""Research and brief-parse result models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ResearchSource:
    """A grounding citation returned by the research call."""

    url: str
    title: str | None = None
    snippet: str | None = None

    def to_dict(self) -> dict:
        data = {"url": self.url}
        if self.title:
            data["title"] = self.title
        if self.snippet:
            data["snippet"] = self.snippet
        return data


@dataclass
class ResearchResult:
    """Narrative produced by the research stage. Not persisted."""

    text: str
    step_count: int
    sources: list[ResearchSource] = field(default_factory=list)


@dataclass
class BriefParseResult:
    """Output of the brief intelligence pipeline."""

    brief_json: dict[str, Any]
    research_summary: str
    sources: list[ResearchSource]
    step_count: int
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "briefJson": self.brief_json,
            "researchSummary": self.research_summary,
            "sources": [s.to_dict() for s in self.sources],
            "stepCount": self.step_count,
            "warnings": list(self.warnings),
        }
