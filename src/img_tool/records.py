from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FailureReason(str, Enum):
    UNREADABLE = "unreadable"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True, slots=True)
class ProcessedRecord:
    input_path: Path
    output_path: Path
    original_format: str
    new_format: str
    size_before_bytes: int
    size_after_bytes: int


@dataclass(frozen=True, slots=True)
class FileError:
    input_path: Path
    reason: FailureReason
    detail: str = ""


@dataclass(frozen=True, slots=True)
class Report:
    processed: tuple[ProcessedRecord, ...] = ()
    failed: tuple[FileError, ...] = ()

    @property
    def success_count(self) -> int:
        return len(self.processed)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count
