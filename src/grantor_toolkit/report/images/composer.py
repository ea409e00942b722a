"""
Module: report.images.composer

Purpose:
    Turn a captured screenshot into a full report page: title banner plus
    the image scaled uniformly into the remaining space and centred.

Key Functions:
    - decode_data_url(): base64 data URL -> CapturedImage
    - scale_to_fit(): Uniform scale into an envelope
    - compose_image_page(): Add one image page to the report

Key Classes:
    - CapturedImage: Decoded screenshot with its pixel size

Dependencies:
    - PIL: Image decoding and size
    - report.layout.builder: ReportBuilder

Used By:
    - report.controller: Screenshot pages
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..errors import ImageDecodeError
from ..layout.builder import ReportBuilder

logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?:;[\w-]+=[\w.-]+)*;base64,", re.IGNORECASE)


@dataclass(frozen=True)
class CapturedImage:
    """
    Decoded screenshot (immutable).

    Attributes:
        label: Page title
        data: Encoded image bytes
        width: Intrinsic width in pixels
        height: Intrinsic height in pixels
    """
    label: str
    data: bytes = field(repr=False)
    width: int
    height: int


def decode_data_url(label: str, data_url: Optional[str]) -> Optional[CapturedImage]:
    """
    Decode a base64 data URL into a CapturedImage.

    Accepts "data:image/png;base64,..." or bare base64 text.

    Args:
        label: Page title for the image
        data_url: Encoded image, or None/empty when the slot was not captured

    Returns:
        CapturedImage, or None when there is nothing to decode

    Raises:
        ImageDecodeError: If the payload is not valid base64 or not an image

    Example:
        >>> decode_data_url("Personal Details", None) is None
        True
    """
    if data_url is None:
        return None
    if not isinstance(data_url, str):
        raise ImageDecodeError(label, f"expected a string, got {type(data_url).__name__}")

    payload = DATA_URL_PATTERN.sub("", data_url.strip(), count=1)
    if not payload:
        return None

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(label, f"invalid base64: {e}") from e

    if not raw:
        return None

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            width, height = img.size
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageDecodeError(label, str(e)) from e

    if width <= 0 or height <= 0:
        raise ImageDecodeError(label, f"image has no pixels ({width}x{height})")

    return CapturedImage(label=label, data=raw, width=width, height=height)


def scale_to_fit(
    image_width: float,
    image_height: float,
    max_width: float,
    max_height: float,
) -> Tuple[float, float]:
    """
    Uniformly scale an image so it fits inside max_width x max_height.

    scale = min(max_width / image_width, max_height / image_height), so the
    aspect ratio is preserved and one dimension fills its limit exactly.

    Args:
        image_width: Source width
        image_height: Source height
        max_width: Envelope width
        max_height: Envelope height

    Returns:
        (draw_width, draw_height)

    Raises:
        ValueError: If any dimension is not positive

    Example:
        >>> scale_to_fit(200, 100, 400, 400)
        (400.0, 200.0)
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Image dimensions must be positive: {image_width}x{image_height}")
    if max_width <= 0 or max_height <= 0:
        raise ValueError(f"Envelope must be positive: {max_width}x{max_height}")

    scale = min(max_width / image_width, max_height / image_height)
    draw_width = min(image_width * scale, max_width)
    draw_height = min(image_height * scale, max_height)
    return float(draw_width), float(draw_height)


def image_envelope(builder: ReportBuilder) -> Tuple[float, float]:
    """Width and height available to an image below the title band."""
    config = builder.config
    max_width = config.content_width
    max_height = (
        config.page_height
        - config.margin_top
        - config.image_title_band
        - config.margin_bottom
    )
    return max_width, max_height


def compose_image_page(builder: ReportBuilder, image: Optional[CapturedImage]) -> bool:
    """
    Add a page holding a title banner and the scaled image.

    Always starts a fresh page, independent of the summary cursor.

    Args:
        builder: Report builder
        image: Captured image, or None to skip

    Returns:
        True if a page was added
    """
    if image is None or not image.data:
        return False

    config = builder.config
    builder.new_page()

    builder.draw_text(
        config.margin_x,
        config.image_title_offset,
        image.label,
        bold=True,
        size=config.image_title_font_size,
        color=config.accent_color,
        max_width=config.content_width,
    )

    max_width, max_height = image_envelope(builder)
    draw_width, draw_height = scale_to_fit(image.width, image.height, max_width, max_height)

    x = config.margin_x + (max_width - draw_width) / 2
    y = config.margin_top + config.image_title_band
    builder.draw_image(x, y, draw_width, draw_height, image.data)

    # Later content must not flow onto an image page
    builder.cursor.y = config.content_bottom

    logger.info(
        f"Added image page '{image.label}' ({image.width}x{image.height}px "
        f"-> {draw_width:.0f}x{draw_height:.0f}pt)"
    )
    return True
