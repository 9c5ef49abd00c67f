from __future__ import annotations

from pathlib import Path


class ImgToolError(Exception):
    """Base class for errors that abort a run."""


class DiscoveryError(ImgToolError):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class ReportError(ImgToolError):
    def __init__(self, destination: Path, message: str) -> None:
        super().__init__(f"failed to write report {destination}: {message}")
        self.destination = destination
