"""SHA-256 checks of downloaded archives and extracted files."""

from __future__ import annotations

import hashlib
import logging
from functools import partial
from pathlib import Path
from typing import Union

CHECKSUMS_FILE = "SHA256SUMS.txt"
_BUFFER_SIZE = 8192

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ChecksumError(Exception):
    """A file did not have the expected checksum."""


def _digest(path: PathLike) -> tuple[str, int]:
    hasher = hashlib.sha256()
    total = 0
    with open(path, "rb") as handle:
        for block in iter(partial(handle.read, _BUFFER_SIZE), b""):
            hasher.update(block)
            total += len(block)
    return hasher.hexdigest(), total


def calculate_sha256(path: PathLike) -> str:
    """Return the lower-case hex SHA-256 of the file at ``path``."""
    checksum, total = _digest(path)
    logger.info("SHA256 of %s: %s (%d bytes)", path, checksum, total)
    return checksum


def verify_archive_checksum(path: PathLike, expected: str) -> str:
    """Check the file against ``expected`` and return the checksum on success."""
    actual = calculate_sha256(path)
    if actual != expected:
        raise ChecksumError(
            f"Archive checksum mismatch:\n  Expected: {expected}\n  Actual: {actual}"
        )
    logger.info("Archive checksum verified: %s", path)
    return actual


def parse_checksums(text: str) -> dict[str, str]:
    """Parse ``<checksum> <filename>`` lines into a filename-to-checksum map."""
    checksums: dict[str, str] = {}
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        parts = line.split()
        if len(parts) >= 2:
            checksums[parts[1]] = parts[0]
        else:
            logger.warning("Skipping invalid line %d: %s", number, line)
    return checksums


def parse_checksums_file(path: PathLike) -> dict[str, str]:
    """Parse a checksums file on disk."""
    return parse_checksums(Path(path).read_text(encoding="utf-8"))


def verify_all_checksums(directory: PathLike) -> dict[str, str]:
    """Check every file in ``directory`` against its checksums file.

    Returns a map of file name to ``"verified"`` or ``"skipped"`` (no entry
    in the checksums file). Nothing is checked when the checksums file is
    missing or empty. Raises ChecksumError if any file fails.
    """
    directory = Path(directory)
    sums_path = directory / CHECKSUMS_FILE
    if not sums_path.exists():
        logger.warning("%s not found, skipping checksum verification", CHECKSUMS_FILE)
        return {}

    checksums = parse_checksums_file(sums_path)
    if not checksums:
        logger.warning("No checksums found in %s", CHECKSUMS_FILE)
        return {}

    statuses: dict[str, str] = {}
    failed = 0
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.name == CHECKSUMS_FILE:
            continue
        expected = checksums.get(path.name)
        if expected is None:
            logger.warning("No checksum found for: %s", path.name)
            statuses[path.name] = "skipped"
            continue
        actual, _ = _digest(path)
        if actual == expected:
            statuses[path.name] = "verified"
        else:
            logger.error(
                "Checksum mismatch for %s: expected %s, got %s", path, expected, actual
            )
            failed += 1

    if failed:
        raise ChecksumError(f"{failed} files failed checksum verification")
    return statuses