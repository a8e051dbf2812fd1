"""Request models - validated handler inputs."""

from dataclasses import dataclass, field

from ..errors import ValidationError
from ..placements import PLACEMENT_KEYS
from .asset import BrandAsset


def _optional_str(body: dict, name: str) -> str | None:
    value = body.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a string")
    return value.strip() or None


def _str_list(body: dict, name: str) -> list[str] | None:
    value = body.get(name)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"'{name}' must be a list of strings")
    return value


def _check_placement(key: str) -> str:
    if key not in PLACEMENT_KEYS:
        raise ValidationError(f"Unknown placement '{key}'. Expected one of: {', '.join(PLACEMENT_KEYS)}")
    return key


@dataclass(frozen=True)
class BriefRequest:
    """Input to brief parsing: ``{intentText, industry?, placements[], sensitiveWords?}``."""

    intent_text: str
    placements: list[str]
    industry: str | None = None
    sensitive_words: list[str] | None = None

    @classmethod
    def from_body(cls, body: dict) -> "BriefRequest":
        intent_text = body.get("intentText")
        if not isinstance(intent_text, str) or not intent_text.strip():
            raise ValidationError("'intentText' is required")

        placements = _str_list(body, "placements")
        if not placements:
            raise ValidationError("'placements' must list at least one placement")

        return cls(
            intent_text=intent_text,
            placements=[_check_placement(p) for p in placements],
            industry=_optional_str(body, "industry"),
            sensitive_words=_str_list(body, "sensitiveWords"),
        )


@dataclass(frozen=True)
class CreativeRequest:
    """Input to creative generation: ``{briefId, placement, brandAssets?[]}``."""

    brief_id: str
    placement: str
    brand_assets: list[BrandAsset] = field(default_factory=list)

    @classmethod
    def from_body(cls, body: dict) -> "CreativeRequest":
        brief_id = body.get("briefId")
        if not isinstance(brief_id, str) or not brief_id.strip():
            raise ValidationError("'briefId' is required")

        # Placement keys are checked by the generator itself
        placement = body.get("placement")
        if not isinstance(placement, str) or not placement:
            raise ValidationError("'placement' is required")

        raw_assets = body.get("brandAssets") or []
        if not isinstance(raw_assets, list):
            raise ValidationError("'brandAssets' must be a list")

        return cls(
            brief_id=brief_id.strip(),
            placement=placement,
            brand_assets=[BrandAsset.from_dict(a) for a in raw_assets],
        )
