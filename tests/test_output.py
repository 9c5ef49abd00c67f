from __future__ import annotations

import json
from pathlib import Path

import pytest

from img_tool.errors import ReportError
from img_tool.output import load_report, write_report
from img_tool.records import FailureReason, FileError, ProcessedRecord, Report


def _report(tmp_path: Path) -> Report:
    return Report(
        processed=(
            ProcessedRecord(
                input_path=tmp_path / "in" / "a.png",
                output_path=tmp_path / "out" / "a.jpg",
                original_format="png",
                new_format="jpg",
                size_before_bytes=1200,
                size_after_bytes=800,
            ),
        ),
        failed=(FileError(tmp_path / "in" / "b.png", FailureReason.UNREADABLE, "cannot identify image file"),),
    )


def test_write_report(tmp_path: Path) -> None:
    out_path = tmp_path / "reports" / "report.json"

    write_report(_report(tmp_path), out_path)

    payload = json.loads(out_path.read_text(encoding="utf-8"))
    assert payload["format_version"] == "1.0"
    assert payload["summary"] == {"total": 2, "processed": 1, "failed": 1}
    assert payload["processed"][0] == {
        "input_path": str(tmp_path / "in" / "a.png"),
        "output_path": str(tmp_path / "out" / "a.jpg"),
        "original_format": "png",
        "new_format": "jpg",
        "size_before_bytes": 1200,
        "size_after_bytes": 800,
    }
    assert payload["failed"][0]["reason"] == "unreadable"
    assert payload["failed"][0]["input_path"] == str(tmp_path / "in" / "b.png")
    assert load_report(out_path) == payload


def test_empty_report(tmp_path: Path) -> None:
    out_path = tmp_path / "report.json"

    write_report(Report(), out_path)

    assert load_report(out_path)["processed"] == []
    assert load_report(out_path)["failed"] == []


def test_write_report_failure_leaves_nothing(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(ReportError):
        write_report(_report(tmp_path), blocker / "report.json")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["blocker"]


def test_write_report_replaces_existing(tmp_path: Path) -> None:
    out_path = tmp_path / "report.json"
    out_path.write_text("stale", encoding="utf-8")

    write_report(Report(), out_path)

    assert load_report(out_path)["summary"]["total"] == 0
    assert [p.name for p in tmp_path.iterdir()] == ["report.json"]
