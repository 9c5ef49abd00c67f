from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

MakeImage = Callable[..., Path]


@pytest.fixture
def make_image() -> MakeImage:
    def _make(
        path: Path,
        *,
        size: tuple[int, int] = (32, 24),
        fmt: str = "PNG",
        mode: str = "RGB",
        color: int | tuple[int, ...] = (200, 30, 30),
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with Image.new(mode, size, color) as im:
            im.save(path, format=fmt)
        return path

    return _make
