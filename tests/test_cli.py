from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from PIL import Image

from img_tool.cli import EXIT_FAILURE, EXIT_OK, EXIT_USAGE, main

MakeImage = Callable[..., Path]


def test_cli_converts_directory(tmp_path: Path, make_image: MakeImage) -> None:
    make_image(tmp_path / "in" / "a.png", size=(40, 40))
    out_dir = tmp_path / "out"

    code = main(
        [
            str(tmp_path / "in"),
            "--output",
            str(out_dir),
            "--to-format",
            "jpg",
            "--resize",
            "10x20",
            "--report",
            str(tmp_path / "report.json"),
            "--no-progress",
        ]
    )

    assert code == EXIT_OK
    with Image.open(out_dir / "a.jpg") as im:
        assert im.size == (10, 20)
    assert (tmp_path / "report.json").is_file()


def test_cli_missing_input_fails(tmp_path: Path) -> None:
    assert main([str(tmp_path / "nope"), "--output", str(tmp_path / "out"), "--no-progress"]) == EXIT_FAILURE


def test_cli_without_input_is_usage_error() -> None:
    assert main(["--no-progress"]) == EXIT_USAGE


def test_cli_bad_resize_is_usage_error(tmp_path: Path) -> None:
    assert main([str(tmp_path), "--resize", "big", "--no-progress"]) == EXIT_USAGE


def test_cli_strict_mode(tmp_path: Path, make_image: MakeImage) -> None:
    make_image(tmp_path / "in" / "a.png")
    (tmp_path / "in" / "b.png").write_bytes(b"nope")
    args = [str(tmp_path / "in"), "--output", str(tmp_path / "out"), "--no-progress"]

    assert main(args) == EXIT_OK
    assert main([*args, "--strict"]) == EXIT_FAILURE


def test_cli_report_failure(tmp_path: Path, make_image: MakeImage) -> None:
    make_image(tmp_path / "in" / "a.png")
    (tmp_path / "blocker").write_text("x", encoding="utf-8")

    code = main(
        [
            str(tmp_path / "in"),
            "--output",
            str(tmp_path / "out"),
            "--report",
            str(tmp_path / "blocker" / "report.json"),
            "--no-progress",
        ]
    )

    assert code == EXIT_FAILURE
    assert (tmp_path / "out" / "a.png").is_file()


def test_cli_with_config_file(tmp_path: Path, make_image: MakeImage) -> None:
    make_image(tmp_path / "images" / "a.png")
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
[input]
path = "images"

[output]
dir = "converted"
format = "webp"

[run]
progress = false
""".strip()
        + "\n",
        encoding="utf-8",
    )

    assert main(["--config", str(config_path)]) == EXIT_OK
    assert (tmp_path / "converted" / "a.webp").is_file()


def test_cli_output_equal_to_input_is_usage_error(tmp_path: Path, make_image: MakeImage) -> None:
    src = make_image(tmp_path / "in" / "a.png")
    original = src.read_bytes()

    assert main([str(tmp_path / "in"), "--output", str(tmp_path / "in"), "--no-progress"]) == EXIT_USAGE
    assert src.read_bytes() == original
