"""Deterministic brief extraction - the fallback when brief intelligence is unavailable."""

import re
from typing import Any

# "targeting <audience>" up to "with", a clause boundary or the end
AUDIENCE_PATTERN = re.compile(r"\btargeting\s+([^.,;]+?)(?=\s+with\b|[.,;]|$)", re.IGNORECASE)

# "for <benefit>" up to "targeting", "with", a clause boundary or the end
BENEFIT_PATTERN = re.compile(r"\bfor\s+([^.,;]+?)(?=\s+targeting\b|\s+with\b|[.,;]|$)", re.IGNORECASE)


def _extract_match(text: str, pattern: re.Pattern) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    return match.group(1).strip() or None


def build_brief_json(
    intent_text: str,
    industry: str | None = None,
    placements: list[str] | tuple[str, ...] = (),
    sensitive_words: list[str] | None = None,
) -> dict[str, Any]:
    """
    Build briefJson from intent text with pattern matching only.

    Example:
        "Launch a sale for eco-friendly sneakers targeting Gen Z with a bold look"
        -> keyBenefits ["eco-friendly sneakers"], audience.interests ["Gen Z"]

    Never calls out and never fails.
    """
    audience = _extract_match(intent_text, AUDIENCE_PATTERN)
    benefit = _extract_match(intent_text, BENEFIT_PATTERN)

    brief_json: dict[str, Any] = {}
    if industry:
        brief_json["industry"] = industry
    brief_json["placements"] = list(placements)
    if audience:
        brief_json["audience"] = {"interests": [audience]}
    brief_json["keyBenefits"] = [benefit] if benefit else []
    brief_json["compliance"] = {"sensitiveWords": list(sensitive_words or [])}
    brief_json["proposedHook"] = intent_text
    return brief_json
