"""Placement catalog: fixed pixel formats for each ad placement."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SafeArea:
    """Margins in pixels that copy and logos must stay inside."""

    top: int
    right: int
    bottom: int
    left: int


@dataclass(frozen=True)
class CopyRules:
    """Copy-length and legibility limits for a placement."""

    min_title_font_size: int
    min_body_font_size: int
    max_title_lines: int
    max_body_lines: int


@dataclass(frozen=True)
class PlacementSpec:
    """A named target format."""

    key: str
    label: str
    category: str                # "mobile", "web" or "tv"
    width: int
    height: int
    aspect_ratio: str            # "W:H" as sent to the render service
    safe_area: SafeArea
    rules: CopyRules


PLACEMENT_SPECS: list[PlacementSpec] = [
    PlacementSpec(
        key="square_1_1",
        label="Square 1:1 (1080×1080)",
        category="mobile",
        width=1080,
        height=1080,
        aspect_ratio="1:1",
        safe_area=SafeArea(64, 64, 64, 64),
        rules=CopyRules(44, 28, 2, 4),
    ),
    PlacementSpec(
        key="feed_4_5",
        label="Feed 4:5 (1080×1350)",
        category="mobile",
        width=1080,
        height=1350,
        aspect_ratio="4:5",
        safe_area=SafeArea(64, 64, 80, 64),
        rules=CopyRules(44, 28, 2, 4),
    ),
    PlacementSpec(
        key="story_9_16",
        label="Story 9:16 (1080×1920)",
        category="mobile",
        width=1080,
        height=1920,
        aspect_ratio="9:16",
        # Extra bottom margin for story UI overlays
        safe_area=SafeArea(120, 80, 220, 80),
        rules=CopyRules(52, 30, 3, 4),
    ),
    PlacementSpec(
        key="landscape_16_9",
        label="Landscape 16:9 (1920×1080)",
        category="web",
        width=1920,
        height=1080,
        aspect_ratio="16:9",
        safe_area=SafeArea(64, 96, 64, 96),
        rules=CopyRules(52, 30, 2, 3),
    ),
    PlacementSpec(
        key="banner_ultrawide",
        label="Ultrawide Banner (2560×720)",
        category="web",
        width=2560,
        height=720,
        # Widest ratio the render service accepts; final fit crops to 2560x720
        aspect_ratio="21:9",
        safe_area=SafeArea(48, 120, 48, 120),
        rules=CopyRules(56, 32, 1, 2),
    ),
    PlacementSpec(
        key="tv_4k",
        label="TV 4K (3840×2160)",
        category="tv",
        width=3840,
        height=2160,
        aspect_ratio="16:9",
        # Overscan margins
        safe_area=SafeArea(160, 200, 160, 200),
        rules=CopyRules(96, 56, 2, 3),
    ),
]

PLACEMENT_SPEC_BY_KEY: dict[str, PlacementSpec] = {spec.key: spec for spec in PLACEMENT_SPECS}

PLACEMENT_KEYS: tuple[str, ...] = tuple(PLACEMENT_SPEC_BY_KEY)


def resolve(key: str) -> PlacementSpec | None:
    """Look up a placement by key. Returns None for unknown keys."""
    return PLACEMENT_SPEC_BY_KEY.get(key)
