from __future__ import annotations

from dataclasses import dataclass

from img_tool.codecs.base import ImageCodec, RasterImage
from img_tool.config import RunConfig
from img_tool.formats import resolve_format


@dataclass(frozen=True, slots=True)
class TransformSpec:
    target_format: str | None = None
    resize: tuple[int, int] | None = None
    grayscale: bool = False

    def __post_init__(self) -> None:
        if self.resize is not None and (self.resize[0] <= 0 or self.resize[1] <= 0):
            raise ValueError(f"resize must be positive, got {self.resize}")
        if self.target_format is not None:
            object.__setattr__(self, "target_format", resolve_format(self.target_format).name)

    @classmethod
    def from_config(cls, config: RunConfig) -> TransformSpec:
        return cls(
            target_format=config.target_format,
            resize=config.resize,
            grayscale=config.grayscale,
        )

    def output_format(self, original_format: str) -> str:
        return self.target_format or original_format

    def describe(self) -> str:
        steps: list[str] = []
        if self.resize is not None:
            steps.append(f"resize={self.resize[0]}x{self.resize[1]}")
        if self.grayscale:
            steps.append("grayscale")
        steps.append(f"format={self.target_format or 'keep'}")
        return ", ".join(steps)


def apply_transforms(image: RasterImage, spec: TransformSpec, codec: ImageCodec) -> RasterImage:
    """
    Resize, then convert to grayscale, as requested by `spec`.

    Intermediate images are closed as soon as they are replaced.
    """
    if spec.resize is not None:
        width, height = spec.resize
        resized = codec.resize(image, width, height)
        image.close()
        image = resized

    if spec.grayscale:
        gray = codec.to_grayscale(image)
        image.close()
        image = gray

    return image
