from img_tool.codecs.base import DecodeError, EncodeError, ImageCodec, RasterImage
from img_tool.codecs.pillow import PillowCodec

__all__ = ["DecodeError", "EncodeError", "ImageCodec", "PillowCodec", "RasterImage"]
