"""
Module: report.images

Purpose:
    Screenshot decoding and full-page image composition.

Key Functions:
    - decode_data_url(): Decode a captured screenshot
    - scale_to_fit(): Aspect-preserving fit into an envelope
    - compose_image_page(): Add an image page to the report

Dependencies:
    - PIL: Image decoding

Used By:
    - report.controller: Screenshot pages
"""

from .composer import (
    CapturedImage,
    compose_image_page,
    decode_data_url,
    image_envelope,
    scale_to_fit,
)

__all__ = [
    "CapturedImage",
    "compose_image_page",
    "decode_data_url",
    "image_envelope",
    "scale_to_fit",
]
