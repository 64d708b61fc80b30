"""Normalization of uploaded images before they are stored.

Every stored image is a WebP no wider than the configured maximum; the
dimensions reported to the catalog are those of the stored file.
"""

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

WEBP_CONTENT_TYPE = "image/webp"


@dataclass(frozen=True)
class PreparedImage:
    content: bytes
    width: int
    height: int
    content_type: str = WEBP_CONTENT_TYPE


def prepare_image(content: bytes, max_width: int, quality: int) -> PreparedImage:
    """Decode, downscale and re-encode an image as WebP.

    Images narrower than ``max_width`` keep their size.

    Raises:
        ValueError: If the bytes are not a decodable image
    """
    if not content:
        raise ValueError("empty upload")

    try:
        with Image.open(io.BytesIO(content)) as source:
            source.load()
            image = source.convert("RGBA" if _has_alpha(source) else "RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValueError(f"not a readable image: {e}") from e

    if image.width > max_width:
        height = max(1, round(image.height * max_width / image.width))
        image = image.resize((max_width, height), Image.Resampling.LANCZOS)

    buffer = io.BytesIO()
    image.save(buffer, format="WEBP", quality=quality)
    return PreparedImage(
        content=buffer.getvalue(), width=image.width, height=image.height
    )


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
