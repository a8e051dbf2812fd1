"""Text generation client (OpenAI Responses API)."""

import logging
from typing import TypeVar

from openai import OpenAI
from pydantic import BaseModel

from ..config import Settings
from ..models.research import ResearchResult, ResearchSource

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

SNIPPET_LENGTH = 200


class LLMClient:
    """Text generation client. Research uses the hosted web search tool."""

    def __init__(self, api_key: str, model: str = "gpt-4.1", base_url: str | None = None):
        if base_url:
            self._client = OpenAI(api_key=api_key, base_url=base_url)
        else:
            self._client = OpenAI(api_key=api_key)
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        return cls(
            api_key=settings.openai_api_key or "",
            model=settings.text_model,
            base_url=settings.openai_base_url,
        )

    def research(
        self,
        system_prompt: str,
        user_message: str,
        max_steps: int = 8,
        web_search: bool = True,
        label: str = "RESEARCH",
    ) -> ResearchResult:
        """Run one tool-augmented research call.

        Args:
            system_prompt: Developer prompt describing the research task.
            user_message: Campaign context.
            max_steps: Step budget; the final answer counts as one step.
            web_search: Attach the hosted web search tool.
            label: Label for usage logging.

        Returns:
            ResearchResult with the narrative, step count and cited sources.
        """
        kwargs = {}
        if web_search:
            kwargs["tools"] = [{"type": "web_search"}]
            kwargs["max_tool_calls"] = max(1, max_steps - 1)

        response = self._client.responses.create(
            model=self.model,
            input=[
                {"role": "developer", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            **kwargs,
        )
        self._log_usage(response, label)

        search_calls = sum(1 for item in response.output if item.type == "web_search_call")
        return ResearchResult(
            text=(response.output_text or "").strip(),
            step_count=search_calls + 1,
            sources=self._extract_sources(response),
        )

    def extract(
        self,
        system_prompt: str,
        user_message: str,
        schema: type[SchemaT],
        label: str = "EXTRACTION",
    ) -> SchemaT | None:
        """Make a structured-output call. Returns the parsed schema, or None if the model gave none."""
        response = self._client.responses.parse(
            model=self.model,
            input=[
                {"role": "developer", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            text_format=schema,
        )
        self._log_usage(response, label)
        return response.output_parsed

    def _extract_sources(self, response) -> list[ResearchSource]:
        """Collect url_citation annotations, deduplicated by URL in first-seen order."""
        sources: dict[str, ResearchSource] = {}
        for item in response.output:
            if item.type != "message":
                continue
            for part in item.content:
                if part.type != "output_text":
                    continue
                for annotation in part.annotations or []:
                    if annotation.type != "url_citation" or annotation.url in sources:
                        continue
                    snippet = part.text[annotation.start_index:annotation.end_index].strip()
                    sources[annotation.url] = ResearchSource(
                        url=annotation.url,
                        title=annotation.title or None,
                        snippet=snippet[:SNIPPET_LENGTH] or None,
                    )
        return list(sources.values())

    def _log_usage(self, response, label: str) -> None:
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(f"{label}: input={usage.input_tokens}, output={usage.output_tokens}")
