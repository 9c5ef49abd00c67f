from __future__ import annotations

import logging
from io import BytesIO

from PIL import Image

from img_tool.codecs.base import DecodeError, EncodeError, RasterImage
from img_tool.formats import FORMATS, format_from_pil, normalize_format_name

LOGGER = logging.getLogger(__name__)

_GRAY_MODES = frozenset({"1", "L", "LA", "La", "I", "I;16", "I;16B", "I;16L", "F"})


class PillowCodec:
    def __init__(self, *, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self._resample = resample

    def decode(self, data: bytes) -> RasterImage:
        """
        Decode `data` fully into memory.

        The format is taken from the content, never from a file name. Any failure
        to identify or decode the bytes is reported as DecodeError.
        """
        try:
            im = Image.open(BytesIO(data))
            pil_format = im.format
            im.load()
        except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as e:
            raise DecodeError(str(e) or type(e).__name__) from e

        if not pil_format:
            im.close()
            raise DecodeError("image format could not be identified")
        return RasterImage(pil=im, format=format_from_pil(pil_format))

    def resize(self, image: RasterImage, width: int, height: int) -> RasterImage:
        if width <= 0 or height <= 0:
            raise ValueError(f"resize target must be positive, got {width}x{height}")
        resized = image.pil.resize((width, height), resample=self._resample)
        return RasterImage(pil=resized, format=image.format)

    def to_grayscale(self, image: RasterImage) -> RasterImage:
        return RasterImage(pil=image.pil.convert("L"), format=image.format)

    def encode(self, image: RasterImage, fmt: str) -> bytes:
        key = normalize_format_name(fmt)
        target = FORMATS.get(key)
        pil_name = target.pil_name if target is not None else key.upper()

        im = image.pil
        converted: Image.Image | None = None
        if target is not None and im.mode not in target.modes:
            fallback = "L" if im.mode in _GRAY_MODES and "L" in target.modes else "RGB"
            LOGGER.debug("Converting mode %s -> %s for %s", im.mode, fallback, target.name)
            try:
                converted = im.convert(fallback)
            except ValueError as e:
                raise EncodeError(f"cannot convert mode {im.mode} for {target.name}: {e}") from e
            im = converted

        save_kwargs: dict[str, object] = {}
        if target is not None and target.lossless_gray and im.mode in _GRAY_MODES:
            save_kwargs["lossless"] = True

        buf = BytesIO()
        try:
            im.save(buf, format=pil_name, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"cannot encode as {key}: {e}") from e
        finally:
            if converted is not None:
                converted.close()
        return buf.getvalue()
