from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from img_tool.errors import ReportError
from img_tool.records import FileError, ProcessedRecord, Report

LOGGER = logging.getLogger(__name__)

REPORT_FORMAT_VERSION = "1.0"


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """
    Write `data` to `path` through a temporary sibling file and `os.replace`.

    Missing parent directories are created. On failure the temporary file is
    removed and `path` is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def _record_payload(record: ProcessedRecord) -> dict[str, Any]:
    return {
        "input_path": str(record.input_path),
        "output_path": str(record.output_path),
        "original_format": record.original_format,
        "new_format": record.new_format,
        "size_before_bytes": int(record.size_before_bytes),
        "size_after_bytes": int(record.size_after_bytes),
    }


def _failure_payload(error: FileError) -> dict[str, Any]:
    return {
        "input_path": str(error.input_path),
        "reason": error.reason.value,
        "detail": error.detail,
    }


def report_payload(report: Report) -> dict[str, Any]:
    return {
        "format_version": REPORT_FORMAT_VERSION,
        "summary": {
            "total": report.total,
            "processed": report.success_count,
            "failed": report.failure_count,
        },
        "processed": [_record_payload(r) for r in report.processed],
        "failed": [_failure_payload(e) for e in report.failed],
    }


def write_report(report: Report, destination: Path) -> None:
    """Serialize `report` as JSON to `destination`; either the whole file lands or nothing does."""
    try:
        text = json.dumps(report_payload(report), indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as e:
        raise ReportError(destination, f"cannot serialize report: {e}") from e

    try:
        atomic_write_bytes(destination, text.encode("utf-8"))
    except OSError as e:
        raise ReportError(destination, e.strerror or str(e)) from e
    LOGGER.info("Report written to %s", destination)


def load_report(path: Path) -> dict[str, Any]:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError(f"report must be a JSON object: {path}")
    return payload
