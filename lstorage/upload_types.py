"""Upload configuration, progress reports and results."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from lstorage.types import InvalidParameterError

DEFAULT_CHUNK_SIZE = 1024 * 1024
DEFAULT_TIMEOUT_SECONDS = 300


class UploadStrategy(enum.Enum):
    """How an upload is split up and sent."""

    CHUNKED = "chunked"
    STREAM = "stream"
    AUTO = "auto"


@dataclass(frozen=True)
class UploadProgress:
    """Snapshot of how far an upload has got."""

    bytes_uploaded: int
    total_bytes: Optional[int] = None
    percentage: float = 0.0
    current_chunk: Optional[int] = None
    total_chunks: Optional[int] = None

    @classmethod
    def create(cls, bytes_uploaded: int, total_bytes: Optional[int] = None) -> "UploadProgress":
        """Progress with the fraction done derived from the byte counts, capped at 1.0."""
        if total_bytes:
            percentage = bytes_uploaded / total_bytes
        else:
            percentage = 0.0
        return cls(
            bytes_uploaded=bytes_uploaded,
            total_bytes=total_bytes,
            percentage=min(percentage, 1.0),
        )

    @classmethod
    def chunked(
        cls,
        bytes_uploaded: int,
        total_bytes: Optional[int],
        current_chunk: int,
        total_chunks: int,
    ) -> "UploadProgress":
        """Progress that also records chunk counters."""
        return dataclasses.replace(
            cls.create(bytes_uploaded, total_bytes),
            current_chunk=current_chunk,
            total_chunks=total_chunks,
        )

    def with_percentage(self, percentage: float) -> "UploadProgress":
        """Return a copy with the fraction done replaced."""
        return dataclasses.replace(self, percentage=percentage)


ProgressCallback = Callable[[UploadProgress], None]


@dataclass
class UploadOptions:
    """Settings for an upload."""

    filepath: Optional[Path] = None
    chunk_size: Optional[int] = DEFAULT_CHUNK_SIZE
    strategy: UploadStrategy = UploadStrategy.AUTO
    on_progress: Optional[ProgressCallback] = field(default=None, repr=False)
    verify: bool = True
    metadata: Any = None
    timeout: Optional[int] = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        if self.filepath is not None and not isinstance(self.filepath, Path):
            self.filepath = Path(self.filepath)

    def validate(self) -> None:
        """Raise InvalidParameterError if a chunk size or timeout of zero is set."""
        if self.chunk_size is not None and self.chunk_size == 0:
            raise InvalidParameterError("chunk_size", "Chunk size must be greater than 0")
        if self.timeout is not None and self.timeout == 0:
            raise InvalidParameterError("timeout", "Timeout must be greater than 0")


@dataclass
class UploadResult:
    """Outcome of a finished upload."""

    cid: str
    size: int
    chunks: Optional[int] = None
    duration_ms: int = 0
    verified: bool = False