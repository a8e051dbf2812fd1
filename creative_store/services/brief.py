"""Brief intelligence service - 2-stage LLM pipeline (research -> extraction)."""

import logging
from typing import Any

from ..clients.llm import LLMClient
from ..config import Settings
from ..errors import ExtractionError, ResearchError
from ..models import BriefParseResult, BriefRequest, BriefSchema, ResearchResult
from ..utils import load_prompt

logger = logging.getLogger(__name__)

NO_SOURCES_WARNING = "No external sources are available in Bedrock research mode."
MAX_STEPS_WARNING = "Research reached maximum steps; results may be incomplete."


class BriefService:
    """Turn free-text campaign intent into a structured brief.

    Failures always propagate as classified errors; substituting a
    deterministic brief is left to the caller.
    """

    def __init__(self, llm: LLMClient, settings: Settings):
        self.llm = llm
        self.settings = settings

    def parse(self, request: BriefRequest) -> BriefParseResult:
        """
        Research the campaign, then extract a brief from the findings.

        Raises:
            ResearchError: research call failed; no extraction was attempted.
            ExtractionError: extraction call failed or returned nothing.
        """
        research = self._research(request)
        warnings = self._warnings_for(research)

        brief_json = self._extract(request, research)
        logger.info(f"Brief extracted: {sorted(brief_json)}")

        return BriefParseResult(
            brief_json=brief_json,
            research_summary=research.text,
            sources=research.sources,
            step_count=research.step_count,
            warnings=warnings,
        )

    def _research(self, request: BriefRequest) -> ResearchResult:
        """Stage 1: one tool-augmented research call."""
        logger.info("=== STAGE: RESEARCH ===")

        if not self.settings.openai_api_key:
            raise ResearchError("OPENAI_API_KEY is not configured")

        try:
            research = self.llm.research(
                load_prompt("research"),
                self._build_research_message(request),
                max_steps=self.settings.research_max_steps,
                web_search=self.settings.research_web_search,
            )
        except Exception as e:
            logger.error(f"Research failed: {e}")
            raise ResearchError(str(e)) from e

        logger.info(f"Research completed in {research.step_count} steps, found {len(research.sources)} sources")
        return research

    def _extract(self, request: BriefRequest, research: ResearchResult) -> dict[str, Any]:
        """Stage 2: one structured-output call over the research narrative."""
        logger.info("=== STAGE: EXTRACTION ===")

        try:
            extracted = self.llm.extract(
                load_prompt("extraction"),
                self._build_extraction_message(request, research),
                BriefSchema,
            )
        except Exception as e:
            logger.error(f"Extraction failed: {e}")
            raise ExtractionError(str(e)) from e

        if extracted is None:
            raise ExtractionError("Failed to extract structured brief from research")

        return self._merge(request, extracted)

    def _warnings_for(self, research: ResearchResult) -> list[str]:
        warnings = []
        if not research.sources:
            warnings.append(NO_SOURCES_WARNING)
        if research.step_count >= self.settings.research_max_steps:
            warnings.append(MAX_STEPS_WARNING)
        return warnings

    def _merge(self, request: BriefRequest, extracted: BriefSchema) -> dict[str, Any]:
        """Overlay request inputs on the extracted brief.

        Request values win for industry, placements and sensitive words; the
        intent text stands in for a missing hook.
        """
        brief_json = extracted.to_brief_json()

        industry = request.industry or brief_json.get("industry")
        if industry:
            brief_json["industry"] = industry

        brief_json["placements"] = list(request.placements)

        compliance = brief_json.get("compliance", {})
        if request.sensitive_words is not None:
            compliance["sensitiveWords"] = list(request.sensitive_words)
        compliance.setdefault("sensitiveWords", [])
        brief_json["compliance"] = compliance

        brief_json["proposedHook"] = brief_json.get("proposedHook") or request.intent_text
        return brief_json

    def _build_context_lines(self, request: BriefRequest) -> list[str]:
        lines = []
        if request.industry:
            lines.append(f"- Industry: {request.industry}")
        if request.placements:
            lines.append(f"- Target placements: {', '.join(request.placements)}")
        if request.sensitive_words:
            lines.append(f"- Known sensitive words to avoid: {', '.join(request.sensitive_words)}")
        return lines

    def _build_research_message(self, request: BriefRequest) -> str:
        lines = [
            "## Campaign Intent",
            request.intent_text,
            "",
            "## Known Context",
            *self._build_context_lines(request),
            "",
            "## Research Task",
            "Research the brand, industry, competitors and audience for this campaign,",
            "then summarise actionable advertising recommendations.",
        ]
        return "\n".join(lines)

    def _build_extraction_message(self, request: BriefRequest, research: ResearchResult) -> str:
        lines = [
            "## Original Campaign Intent",
            request.intent_text,
            "",
            "## Known Context",
            *self._build_context_lines(request),
            "",
            "## Research Findings",
            research.text,
            "",
            "## Task",
            "Extract a structured advertising brief from the research above.",
        ]
        return "\n".join(lines)
