from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from tqdm import tqdm
from tqdm.contrib.logging import logging_redirect_tqdm

from img_tool.codecs.base import ImageCodec
from img_tool.codecs.pillow import PillowCodec
from img_tool.config import RunConfig
from img_tool.output import write_report
from img_tool.paths import iter_candidate_paths, path_key
from img_tool.processor import process_file
from img_tool.records import FileError, ProcessedRecord, Report
from img_tool.transform import TransformSpec

LOGGER = logging.getLogger(__name__)


def run_batch(
    paths: Iterable[Path],
    spec: TransformSpec,
    output_dir: Path,
    *,
    input_root: Path | None = None,
    codec: ImageCodec | None = None,
    progress: bool = False,
) -> Report:
    """
    Process `paths` one at a time, in order, and collect the outcome of each.

    A failing file is recorded and logged; it never stops the batch.
    """
    codec = codec if codec is not None else PillowCodec()

    processed: list[ProcessedRecord] = []
    failed: list[FileError] = []
    taken: set[str] = set()

    for path in tqdm(paths, desc="process", unit="file", disable=not progress):
        result = process_file(
            path,
            spec,
            output_dir,
            input_root=input_root,
            codec=codec,
            taken=taken,
        )
        if isinstance(result, FileError):
            LOGGER.warning("Failed %s: %s (%s)", path, result.reason.value, result.detail)
            failed.append(result)
            continue

        taken.add(path_key(result.output_path))
        processed.append(result)

    return Report(processed=tuple(processed), failed=tuple(failed))


def run_pipeline(*, config: RunConfig, codec: ImageCodec | None = None) -> Report:
    spec = TransformSpec.from_config(config)
    input_path = config.input_path
    output_dir = config.output_dir

    paths = iter_candidate_paths(input_path, exclude=(output_dir,))
    input_root = input_path if input_path.is_dir() else None
    output_dir.mkdir(parents=True, exist_ok=True)

    LOGGER.info("Processing %s -> %s (%s)", input_path, output_dir, spec.describe())

    with logging_redirect_tqdm():
        report = run_batch(
            paths,
            spec,
            output_dir,
            input_root=input_root,
            codec=codec,
            progress=config.progress,
        )

    if report.total == 0:
        LOGGER.warning("No files found to process under %s", input_path)
    else:
        LOGGER.info(
            "Done: %d file(s), %d processed, %d failed",
            report.total,
            report.success_count,
            report.failure_count,
        )

    if config.report_path is not None:
        write_report(report, config.report_path)

    return report
