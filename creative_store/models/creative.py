"""Creative models - rendered image and its persisted draft."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GeneratedImage:
    """An uploaded render for one placement."""

    image_url: str
    aspect_ratio: str

    def to_dict(self) -> dict:
        return {"imageUrl": self.image_url, "aspectRatio": self.aspect_ratio}


@dataclass(frozen=True)
class Draft:
    """A persisted, placement-specific creative. Immutable once created."""

    id: str
    brief_id: str
    draft_json: dict[str, Any]   # {placement, imageUrl, aspectRatio}
    created_at: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "briefId": self.brief_id,
            "draftJson": self.draft_json,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Draft":
        return cls(
            id=data["id"],
            brief_id=data["briefId"],
            draft_json=data.get("draftJson") or {},
            created_at=data.get("createdAt", ""),
        )


@dataclass(frozen=True)
class CreativeResult:
    """Result of one creative generation."""

    image: GeneratedImage
    draft: Draft

    def to_dict(self) -> dict:
        return {"image": self.image.to_dict(), "draft": self.draft.to_dict()}
