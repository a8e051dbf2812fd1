"""Business logic services."""

from .brief import BriefService
from .brief_analysis import build_brief_json
from .creative import CreativeService

__all__ = ["BriefService", "CreativeService", "build_brief_json"]
