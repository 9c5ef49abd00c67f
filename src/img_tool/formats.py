from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ImageFormat:
    name: str
    pil_name: str
    extension: str
    # Pillow modes the encoder accepts as-is; anything else is converted to RGB.
    modes: tuple[str, ...]
    # Grayscale input is stored losslessly so the RGB channels the encoder expands it to stay equal.
    lossless_gray: bool = False


FORMATS: dict[str, ImageFormat] = {
    fmt.name: fmt
    for fmt in (
        ImageFormat("jpg", "JPEG", ".jpg", ("L", "RGB", "CMYK")),
        ImageFormat("png", "PNG", ".png", ("1", "L", "LA", "I", "P", "RGB", "RGBA")),
        ImageFormat("webp", "WEBP", ".webp", ("L", "RGB", "RGBA"), lossless_gray=True),
        ImageFormat("bmp", "BMP", ".bmp", ("1", "L", "P", "RGB")),
        ImageFormat("gif", "GIF", ".gif", ("L", "P", "RGB", "RGBA")),
        ImageFormat("tiff", "TIFF", ".tiff", ("1", "L", "LA", "P", "RGB", "RGBA", "CMYK")),
    )
}

ALIASES: dict[str, str] = {"jpeg": "jpg", "tif": "tiff"}

# Pillow tags that are containers for one of the formats above.
_PIL_ALIASES: dict[str, str] = {"MPO": "jpg"}

SUPPORTED_OUTPUT_FORMATS: tuple[str, ...] = tuple(sorted(FORMATS))


def normalize_format_name(name: str) -> str:
    key = name.strip().lower().lstrip(".")
    return ALIASES.get(key, key)


def resolve_format(name: str) -> ImageFormat:
    """
    Look up a supported output format by name or alias (case-insensitive).

    Raises ValueError for names outside the table.
    """
    key = normalize_format_name(name)
    try:
        return FORMATS[key]
    except KeyError:
        raise ValueError(
            f"unsupported image format: {name!r} (supported: {', '.join(SUPPORTED_OUTPUT_FORMATS)})"
        ) from None


def format_from_pil(pil_name: str) -> str:
    """Canonical report name for a format tag as reported by Pillow (e.g. "JPEG" -> "jpg")."""
    if pil_name.upper() in _PIL_ALIASES:
        return _PIL_ALIASES[pil_name.upper()]
    for fmt in FORMATS.values():
        if fmt.pil_name == pil_name.upper():
            return fmt.name
    return normalize_format_name(pil_name)


def extension_for(name: str) -> str:
    key = normalize_format_name(name)
    fmt = FORMATS.get(key)
    return fmt.extension if fmt is not None else f".{key}"
