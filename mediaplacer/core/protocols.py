"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Optional, Protocol

from .models import RunSummary


class TagReader(Protocol):
    """Interface for metadata extraction.

    Implementations:
    - EmbeddedTagReader: Pillow EXIF decoder
    - ExifToolTagReader: external exiftool executable
    - ChainedTagReader: one of the above with a fallback
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Reader name for logging."""
        ...

    @abstractmethod
    def read(self, path: Path) -> dict[str, str]:
        """Return the tag map of ``path`` or raise MetadataUnavailable."""
        ...


class ProgressReporter(Protocol):
    """Interface for user-facing run output."""

    @abstractmethod
    def start_phase(self, name: str, total: Optional[int]) -> None:
        """Start a progress display; ``total`` may be unknown."""
        ...

    @abstractmethod
    def advance_phase(self, amount: int = 1) -> None:
        """Advance the current progress display."""
        ...

    @abstractmethod
    def end_phase(self) -> None:
        """Stop the current progress display."""
        ...

    @abstractmethod
    def info(self, message: str) -> None:
        ...

    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        ...

    @abstractmethod
    def print_header(self, title: str) -> None:
        ...

    @abstractmethod
    def print_config(self, config_items: dict) -> None:
        ...

    @abstractmethod
    def print_stats(self, summary: RunSummary) -> None:
        ...
