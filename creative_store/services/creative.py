"""Creative generation service - base render -> logo overlay -> upload -> draft."""

import base64
import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from .. import placements
from ..clients.image import ImageClient
from ..clients.records import RecordsClient
from ..clients.storage import StorageClient, UploadResult
from ..config import Settings
from ..errors import AIError, MissingApiKeyError, NotFoundError, ValidationError
from ..models import BrandAsset, Brief, CreativeResult, GeneratedImage
from ..models.asset import group_by_kind
from ..placements import PlacementSpec
from ..utils import load_prompt, now_millis

logger = logging.getLogger(__name__)

KEY_PREFIX = "creative-store-images/drafts"


class CreativeService:
    """Render a branded ad image for one placement and persist it as a draft."""

    def __init__(
        self,
        image: ImageClient,
        storage: StorageClient,
        records: RecordsClient,
        settings: Settings,
    ):
        self.image = image
        self.storage = storage
        self.records = records
        self.settings = settings

    def generate(
        self,
        brief_id: str,
        placement: str,
        brand_assets: list[BrandAsset] | None = None,
    ) -> CreativeResult:
        """
        Generate one creative.

        1. Render base image (products/references as visual input)
        2. Overlay the first logo, if any logo was supplied
        3. Fit to the placement's pixel size as PNG
        4. Upload to storage
        5. Persist a new draft

        Nothing is persisted unless every step succeeds.
        """
        if not self.settings.image_api_key:
            raise MissingApiKeyError("IMAGE_API_KEY is not configured")

        spec = placements.resolve(placement)
        if spec is None:
            raise ValidationError(f"Unknown placement '{placement}'")

        brief = self.records.get_brief(brief_id)
        if brief is None:
            raise NotFoundError(f"Brief not found: {brief_id}")

        logos, products, references = group_by_kind(brand_assets or [])
        logger.info(
            f"Generating {spec.key} for brief {brief_id} "
            f"(logos={len(logos)}, products={len(products)}, references={len(references)})"
        )

        image_bytes = self._render_base(brief, spec, products, references)

        if logos:
            image_bytes = self._overlay_logo(image_bytes, logos[0])

        final_bytes = self._fit_to_placement(image_bytes, spec)
        upload = self._upload(brief.id, final_bytes)

        image = GeneratedImage(image_url=upload.url, aspect_ratio=spec.aspect_ratio)
        draft = self.records.create_draft(
            brief.id,
            {
                "placement": spec.key,
                "imageUrl": image.image_url,
                "aspectRatio": image.aspect_ratio,
            },
        )
        logger.info(f"Draft {draft.id} created for brief {brief.id}")

        return CreativeResult(image=image, draft=draft)

    def _render_base(
        self,
        brief: Brief,
        spec: PlacementSpec,
        products: list[BrandAsset],
        references: list[BrandAsset],
    ) -> bytes:
        """Single render call; asset count never changes the number of calls."""
        prompt = self._build_prompt(brief, spec, bool(products), bool(references))
        logger.debug(f"Image prompt: {prompt}")

        image_bytes = self.image.generate(
            prompt,
            aspect_ratio=spec.aspect_ratio,
            images=[asset.data_url for asset in products + references],
        )
        logger.info(f"Base image generated ({len(image_bytes)} bytes)")
        return image_bytes

    def _overlay_logo(self, image_bytes: bytes, logo: BrandAsset) -> bytes:
        """Composite one logo onto the base render."""
        logger.info(f"Overlaying logo onto base image ({logo.name or logo.mime_type})")
        base_url = f"data:{self._mime_type(image_bytes)};base64,{base64.b64encode(image_bytes).decode('ascii')}"

        composited = self.image.edit(load_prompt("logo_overlay"), images=[base_url, logo.data_url])
        logger.info(f"Logo overlay complete ({len(composited)} bytes)")
        return composited

    def _fit_to_placement(self, image_bytes: bytes, spec: PlacementSpec) -> bytes:
        """Crop-to-fill to the placement's exact pixel size and encode PNG."""
        try:
            with Image.open(BytesIO(image_bytes)) as img:
                img.load()
                mode = "RGBA" if img.mode in ("RGBA", "LA", "P") else "RGB"
                fitted = ImageOps.fit(img.convert(mode), (spec.width, spec.height), Image.LANCZOS)
        except (UnidentifiedImageError, OSError) as e:
            raise AIError(f"Generated image could not be decoded: {e}") from e

        output = BytesIO()
        fitted.save(output, format="PNG")
        return output.getvalue()

    def _upload(self, brief_id: str, image_bytes: bytes) -> UploadResult:
        key = f"{KEY_PREFIX}/{brief_id}/{now_millis()}.png"
        return self.storage.upload_image(key, image_bytes, content_type="image/png")

    def _mime_type(self, image_bytes: bytes) -> str:
        try:
            with Image.open(BytesIO(image_bytes)) as img:
                return img.get_format_mimetype() or "image/png"
        except (UnidentifiedImageError, OSError) as e:
            raise AIError(f"Generated image could not be decoded: {e}") from e

    def _build_prompt(
        self,
        brief: Brief,
        spec: PlacementSpec,
        has_products: bool,
        has_references: bool,
    ) -> str:
        """Build the render prompt from brief fields and placement geometry."""
        brief_json = brief.brief_json or {}
        safe = spec.safe_area

        parts = [
            "Create a high-quality advertisement image.",
            f"Generate the image at {spec.aspect_ratio} aspect ratio ({spec.width}x{spec.height} pixels).",
            f"Keep all text and key elements inside the safe area: {safe.top}px from the top, "
            f"{safe.right}px from the right, {safe.bottom}px from the bottom and {safe.left}px from the left.",
        ]

        hook = (brief_json.get("proposedHook") or "").strip()
        if hook:
            parts.append(
                f'Include this advertising text prominently and legibly: "{hook}". '
                f"Set it in at most {spec.rules.max_title_lines} lines with high contrast, "
                "styled to match the overall design."
            )

        if brief.intent_text:
            parts.append(f"Campaign intent: {brief.intent_text.strip()}.")
        else:
            parts.append("Use a versatile, modern marketing aesthetic.")

        if industry := brief_json.get("industry"):
            parts.append(f"Industry: {industry}.")

        if benefits := brief_json.get("keyBenefits"):
            parts.append(f"Key benefits to convey: {', '.join(benefits)}.")

        if interests := (brief_json.get("audience") or {}).get("interests"):
            parts.append(f"Target audience: {', '.join(interests)}.")

        style = brief_json.get("style") or {}
        if tone := style.get("tone"):
            parts.append(f"Tone: {tone}.")
        if keywords := style.get("keywords"):
            parts.append(f"Style keywords: {', '.join(keywords)}.")

        if has_products:
            parts.append("Incorporate the provided product images naturally into the composition.")
        if has_references:
            parts.append("Use the provided reference images as style and mood inspiration.")

        return " ".join(parts)
