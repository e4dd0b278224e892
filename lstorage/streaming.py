"""Reader wrappers that count bytes and report upload progress."""

from __future__ import annotations

import dataclasses
from typing import Any, Optional

from lstorage.upload_types import UploadOptions, UploadProgress

_MIN_CHUNK_SIZE = 64 * 1024
_MAX_CHUNK_SIZE = 4 * 1024 * 1024


class _ProgressTracker:
    def __init__(self, options: UploadOptions, total_bytes: Optional[int]) -> None:
        self.options = options
        self.total_bytes = total_bytes
        self._bytes_read = 0
        self._chunk_count = 0

    @property
    def bytes_read(self) -> int:
        """Bytes passed through so far."""
        return self._bytes_read

    @property
    def chunk_count(self) -> int:
        """Number of non-empty reads so far."""
        return self._chunk_count

    def progress(self) -> UploadProgress:
        """Current progress snapshot."""
        if self.total_bytes:
            percentage = self._bytes_read / self.total_bytes
        else:
            percentage = 0.0
        return UploadProgress.chunked(
            self._bytes_read, self.total_bytes, self._chunk_count, self._chunk_count
        ).with_percentage(min(percentage, 1.0))

    def _record(self, data: bytes) -> bytes:
        if data:
            self._bytes_read += len(data)
            self._chunk_count += 1
            if self.options.on_progress is not None:
                self.options.on_progress(self.progress())
        return data


class StreamingUploadReader(_ProgressTracker):
    """Wraps a binary reader and reports progress on every non-empty read."""

    def __init__(
        self,
        reader: Any,
        options: Optional[UploadOptions] = None,
        total_bytes: Optional[int] = None,
    ) -> None:
        super().__init__(options if options is not None else UploadOptions(), total_bytes)
        self._inner = reader

    def progress(self) -> UploadProgress:
        """Current progress snapshot."""
        return super().progress()

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes from the wrapped reader."""
        return self._record(self._inner.read(size))


class AsyncStreamingUploadReader(_ProgressTracker):
    """Wraps an asynchronous reader and reports progress on every non-empty read."""

    def __init__(
        self,
        reader: Any,
        options: Optional[UploadOptions] = None,
        total_bytes: Optional[int] = None,
    ) -> None:
        super().__init__(options if options is not None else UploadOptions(), total_bytes)
        self._inner = reader

    def progress(self) -> UploadProgress:
        """Current progress snapshot."""
        return super().progress()

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes from the wrapped reader."""
        return self._record(await self._inner.read(size))


def create_streaming_reader(
    reader: Any,
    options: Optional[UploadOptions] = None,
    total_size: Optional[int] = None,
) -> StreamingUploadReader:
    """Wrap ``reader``, choosing a chunk size from ``total_size`` when it is known."""
    options = options if options is not None else UploadOptions()
    if total_size is not None:
        optimal = min(max(total_size // 100, _MIN_CHUNK_SIZE), _MAX_CHUNK_SIZE)
        options = dataclasses.replace(options, chunk_size=optimal)
    return StreamingUploadReader(reader, options, total_size)