from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from PIL import Image


class DecodeError(Exception):
    pass


class EncodeError(Exception):
    pass


@dataclass(frozen=True, slots=True)
class RasterImage:
    pil: Image.Image
    format: str  # canonical name of the format sniffed from content, e.g. "png"

    @property
    def width(self) -> int:
        return int(self.pil.width)

    @property
    def height(self) -> int:
        return int(self.pil.height)

    @property
    def mode(self) -> str:
        return self.pil.mode

    def close(self) -> None:
        self.pil.close()


class ImageCodec(Protocol):
    def decode(self, data: bytes) -> RasterImage:
        ...

    def resize(self, image: RasterImage, width: int, height: int) -> RasterImage:
        ...

    def to_grayscale(self, image: RasterImage) -> RasterImage:
        ...

    def encode(self, image: RasterImage, fmt: str) -> bytes:
        ...
