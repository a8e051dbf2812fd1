"""Data models."""

from .asset import BrandAsset
from .brief import Brief, BriefSchema
from .creative import CreativeResult, Draft, GeneratedImage
from .request import BriefRequest, CreativeRequest
from .research import BriefParseResult, ResearchResult, ResearchSource

__all__ = [
    "BrandAsset",
    "Brief",
    "BriefSchema",
    "BriefParseResult",
    "BriefRequest",
    "CreativeRequest",
    "CreativeResult",
    "Draft",
    "GeneratedImage",
    "ResearchResult",
    "ResearchSource",
]
