from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from img_tool.formats import normalize_format_name, resolve_format

DEFAULT_OUTPUT_DIR = Path("output")


@dataclass(frozen=True, slots=True)
class RunConfig:
    input_path: Path
    output_dir: Path = DEFAULT_OUTPUT_DIR
    target_format: str | None = None  # None keeps the source format
    resize: tuple[int, int] | None = None  # (width, height)
    grayscale: bool = False
    report_path: Path | None = None
    progress: bool = True
    strict: bool = False


def parse_resize(value: str) -> tuple[int, int]:
    """
    Parse "WIDTHxHEIGHT" (e.g. "800x600") into a (width, height) tuple.

    Raises ValueError when the string is malformed or either side is not positive.
    """
    parts = value.strip().lower().split("x")
    if len(parts) != 2:
        raise ValueError(f"resize must look like WIDTHxHEIGHT, got {value!r}")
    try:
        width, height = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"resize must look like WIDTHxHEIGHT, got {value!r}") from None
    if width <= 0 or height <= 0:
        raise ValueError(f"resize dimensions must be > 0, got {value!r}")
    return width, height


def _as_dict_table(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TypeError(f"config: [{name}] must be a TOML table")
    return value


def _resolve_from(base_dir: Path | None, maybe_relative: Path) -> Path:
    if base_dir is None or maybe_relative.is_absolute():
        return maybe_relative
    return (base_dir / maybe_relative).resolve()


def _get_path(table: dict[str, Any], key: str, name: str) -> Path | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"config: {name} must be a non-empty string path")
    return Path(value)


def _get_bool(table: dict[str, Any], key: str, default: bool) -> bool:
    value = table.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"config: {key} must be a bool")
    return value


def _get_optional_str(table: dict[str, Any], key: str) -> str | None:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"config: {key} must be a string")
    return value


def _get_resize(table: dict[str, Any], key: str) -> tuple[int, int] | None:
    value = table.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return parse_resize(value)
    if (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(x, int) and not isinstance(x, bool) for x in value)
    ):
        return (value[0], value[1])
    raise TypeError(f"config: {key} must be \"WIDTHxHEIGHT\" or [width, height]")


def _validate(config: RunConfig) -> None:
    if config.input_path.resolve() == config.output_dir.resolve():
        raise ValueError("config: output.dir must not be the input directory")
    if config.resize is not None:
        width, height = config.resize
        if width <= 0 or height <= 0:
            raise ValueError("config: transform.resize width/height must be > 0")
    if config.target_format is not None:
        resolve_format(config.target_format)


def config_from_data(
    data: Mapping[str, Any],
    *,
    base_dir: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> RunConfig:
    """
    Build a RunConfig from TOML-shaped `data` plus flat `overrides`.

    Relative paths found in `data` resolve against `base_dir`. Override keys are
    RunConfig field names; a None value means "not given" and keeps the table value.
    """
    input_table = _as_dict_table(data.get("input"), "input")
    output_table = _as_dict_table(data.get("output"), "output")
    transform_table = _as_dict_table(data.get("transform"), "transform")
    report_table = _as_dict_table(data.get("report"), "report")
    run_table = _as_dict_table(data.get("run"), "run")

    input_path = _get_path(input_table, "path", "input.path")
    output_dir = _get_path(output_table, "dir", "output.dir")
    report_path = _get_path(report_table, "path", "report.path")

    values: dict[str, Any] = {
        "input_path": _resolve_from(base_dir, input_path) if input_path else None,
        "output_dir": _resolve_from(base_dir, output_dir or DEFAULT_OUTPUT_DIR),
        "target_format": _get_optional_str(output_table, "format"),
        "resize": _get_resize(transform_table, "resize"),
        "grayscale": _get_bool(transform_table, "grayscale", False),
        "report_path": _resolve_from(base_dir, report_path) if report_path else None,
        "progress": _get_bool(run_table, "progress", True),
        "strict": _get_bool(run_table, "strict", False),
    }

    for key, value in (overrides or {}).items():
        if key not in values:
            raise KeyError(f"unknown config override: {key}")
        if value is None:
            continue
        if key == "resize" and isinstance(value, str):
            value = parse_resize(value)
        elif key in {"input_path", "output_dir", "report_path"}:
            value = Path(value)
        values[key] = value

    if values["input_path"] is None:
        raise TypeError("config: input.path must be a non-empty string path")
    if values["target_format"] is not None:
        values["target_format"] = normalize_format_name(values["target_format"])

    config = RunConfig(**values)
    _validate(config)
    return config


def load_config(path: Path, *, overrides: Mapping[str, Any] | None = None) -> RunConfig:
    if not path.exists():
        raise FileNotFoundError(f"config not found: {path}")

    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    return config_from_data(data, base_dir=path.resolve().parent, overrides=overrides)
