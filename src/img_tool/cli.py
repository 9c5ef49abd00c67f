from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from pathlib import Path

from img_tool.config import RunConfig, config_from_data, load_config
from img_tool.errors import ImgToolError
from img_tool.formats import SUPPORTED_OUTPUT_FORMATS
from img_tool.pipeline import run_pipeline

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

LOG_LEVELS = ("debug", "info", "warning", "error")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="img-tool",
        description="Convert, resize and grayscale images in batch, with an optional JSON report.",
    )
    parser.add_argument("input", nargs="?", help="Input image file or directory.")
    parser.add_argument("--config", help="Path to a config TOML; command line flags take precedence.")
    parser.add_argument("--output", help="Output directory (default: output).")
    parser.add_argument(
        "--to-format",
        help=f"Output format ({', '.join(SUPPORTED_OUTPUT_FORMATS)}); keeps the source format if omitted.",
    )
    parser.add_argument("--resize", help="Resize to exactly WIDTHxHEIGHT, e.g. 800x600.")
    parser.add_argument(
        "--grayscale", action="store_true", default=None, help="Convert to grayscale."
    )
    parser.add_argument("--report", help="Write a JSON report to this path.")
    parser.add_argument(
        "--no-progress", dest="progress", action="store_false", default=None, help="Hide the progress bar."
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Exit non-zero when any file fails to process.",
    )
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="info", help="Log verbosity.")
    return parser


def _resolve_config(args: argparse.Namespace) -> RunConfig:
    overrides = {
        "input_path": args.input,
        "output_dir": args.output,
        "target_format": args.to_format,
        "resize": args.resize,
        "grayscale": args.grayscale,
        "report_path": args.report,
        "progress": args.progress,
        "strict": args.strict,
    }
    if args.config:
        config_path = Path(args.config).expanduser().resolve()
        return load_config(config_path, overrides=overrides)
    return config_from_data({}, overrides=overrides)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _resolve_config(args)
    except (FileNotFoundError, TypeError, ValueError) as e:
        parser.print_usage()
        LOGGER.error("%s", e)
        return EXIT_USAGE

    try:
        report = run_pipeline(config=config)
    except (ImgToolError, OSError) as e:
        LOGGER.error("%s", e)
        return EXIT_FAILURE

    if config.strict and report.failure_count:
        LOGGER.error("%d file(s) failed (strict mode)", report.failure_count)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
