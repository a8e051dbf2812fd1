"""Brand asset model - uploaded bytes that condition one generation."""

import base64
import binascii
from dataclasses import dataclass

from ..errors import ValidationError

ASSET_KINDS = ("logo", "product", "reference")


@dataclass(frozen=True)
class BrandAsset:
    """A logo, product shot or reference image supplied with a request.

    Lives only for the duration of one request; never stored as-is.
    """

    kind: str                    # "logo", "product" or "reference"
    mime_type: str
    data_base64: str
    name: str | None = None

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data_base64}"

    def decode(self) -> bytes:
        return base64.b64decode(self.data_base64)

    @classmethod
    def from_dict(cls, data: dict) -> "BrandAsset":
        """Build from the wire shape ``{kind, mimeType, dataBase64, name?}``."""
        if not isinstance(data, dict):
            raise ValidationError("Brand asset must be an object")

        kind = data.get("kind")
        if kind not in ASSET_KINDS:
            raise ValidationError(f"Brand asset kind must be one of {', '.join(ASSET_KINDS)}")

        mime_type = data.get("mimeType")
        if not isinstance(mime_type, str) or not mime_type.strip():
            raise ValidationError("Brand asset 'mimeType' is required")

        data_base64 = data.get("dataBase64")
        if not isinstance(data_base64, str) or not data_base64.strip():
            raise ValidationError("Brand asset 'dataBase64' is required")
        # Line-wrapped (MIME style) base64 is valid input
        data_base64 = "".join(data_base64.split())
        try:
            base64.b64decode(data_base64, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Brand asset 'dataBase64' is not valid base64")

        name = data.get("name")
        if name is not None and (not isinstance(name, str) or not name):
            raise ValidationError("Brand asset 'name' must be a non-empty string")

        return cls(kind=kind, mime_type=mime_type.strip(), data_base64=data_base64, name=name)


def group_by_kind(assets: list[BrandAsset]) -> tuple[list[BrandAsset], list[BrandAsset], list[BrandAsset]]:
    """Split assets into (logos, products, references), keeping input order."""
    logos = [a for a in assets if a.kind == "logo"]
    products = [a for a in assets if a.kind == "product"]
    references = [a for a in assets if a.kind == "reference"]
    return logos, products, references
