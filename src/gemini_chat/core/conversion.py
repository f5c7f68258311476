"""Conversion of heterogeneous caller input into parts and contents.

Accepted inputs:

- ``str`` becomes a text part.
- Any part instance passes through unchanged.
- ``PIL.Image.Image`` is encoded as JPEG.
- ``bytes`` must decode as an image; the MIME type comes from the decoded format.
- Lists and tuples are flattened in order.
"""

from __future__ import annotations

from collections.abc import Sequence
import io
import logging
from typing import Any

import PIL.Image

from gemini_chat.constants import DEFAULT_JPEG_QUALITY, JPEG_MIME_TYPE
from gemini_chat.core.types import DataPart, ModelContent, Part, TextPart, is_part
from gemini_chat.exceptions import ImageConversionError, ValidationError

log = logging.getLogger(__name__)

_MIME_ALIASES = {"image/jpg": JPEG_MIME_TYPE}


def _decode_image(data: bytes) -> PIL.Image.Image:
    """Fully decode image bytes, raising on anything truncated or malformed."""
    if not data:
        raise ImageConversionError("No image bytes.")
    try:
        image = PIL.Image.open(io.BytesIO(data))
        image.load()
    except Exception as e:
        log.error("Failed to load an image from raw image bytes (%d bytes).", len(data))
        raise ImageConversionError(
            f"Bytes could not be decoded as an image: {e}",
            reason=ImageConversionError.INVALID_UNDERLYING_IMAGE,
        ) from e
    return image


def image_part(data: bytes, mime_type: str | None = None) -> DataPart:
    """Create an image part from encoded image bytes.

    The bytes are sent unchanged. They must decode as an image, and when
    `mime_type` is given the decoded format must match it.

    Raises:
        ImageConversionError: If the bytes are not a decodable image of the
            declared type.
    """
    image = _decode_image(data)
    detected = PIL.Image.MIME.get(image.format or "")
    if detected is None:
        raise ImageConversionError(
            f"Unrecognized image format: {image.format!r}",
            reason=ImageConversionError.INVALID_UNDERLYING_IMAGE,
        )
    declared = _MIME_ALIASES.get(mime_type.lower(), mime_type.lower()) if mime_type else None
    if declared is not None and declared != detected:
        raise ImageConversionError(
            f"Image declared as {mime_type} but decoded as {detected}",
            reason=ImageConversionError.MIME_TYPE_MISMATCH,
        )
    return DataPart(mime_type=detected, data=bytes(data))


def jpeg_part(image: PIL.Image.Image, quality: int = DEFAULT_JPEG_QUALITY) -> DataPart:
    """Encode a Pillow image as a JPEG part."""
    try:
        if image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        output = io.BytesIO()
        image.save(output, format="JPEG", quality=quality)
    except Exception as e:
        raise ImageConversionError(
            f"Image could not be converted to JPEG: {e}",
            reason=ImageConversionError.COULD_NOT_CONVERT_TO_JPEG,
        ) from e
    data = output.getvalue()
    if not data:
        raise ImageConversionError(
            "JPEG encoding produced no data",
            reason=ImageConversionError.COULD_NOT_CONVERT_TO_JPEG,
        )
    return DataPart(mime_type=JPEG_MIME_TYPE, data=data)


def _to_part(value: Any) -> Part:
    if isinstance(value, str):
        return TextPart(value)
    if is_part(value):
        return value
    if isinstance(value, PIL.Image.Image):
        return jpeg_part(value)
    if isinstance(value, bytes | bytearray):
        return image_part(bytes(value))
    raise ValidationError(f"Cannot convert {type(value).__name__} to a content part")


def to_parts(values: Any) -> tuple[Part, ...]:
    """Convert a single input or a list of inputs into parts."""
    if isinstance(values, ModelContent):
        raise ValidationError("ModelContent cannot be used as a part")
    if isinstance(values, list | tuple):
        parts: list[Part] = []
        for value in values:
            if isinstance(value, ModelContent):
                raise ValidationError("Cannot mix ModelContent with parts")
            parts.extend(to_parts(value))
        return tuple(parts)
    return (_to_part(values),)


def to_contents(values: Any) -> list[ModelContent]:
    """Normalize generate/count input into a list of contents.

    A `ModelContent` or a sequence of them is used as-is. Anything else is
    converted into parts of a single content with no role.
    """
    if isinstance(values, ModelContent):
        return [values]
    if isinstance(values, Sequence) and not isinstance(values, str | bytes | bytearray):
        if values and any(isinstance(v, ModelContent) for v in values):
            if not all(isinstance(v, ModelContent) for v in values):
                raise ValidationError("Cannot mix ModelContent with parts")
            return list(values)
    return [ModelContent(parts=to_parts(values))]
