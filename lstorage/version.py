"""Choice of the prebuilt library release to use."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional, Union

from lstorage.urls import LATEST

STORAGE_VERSION_VAR = "LOGOS_STORAGE_VERSION"
MANIFEST_FILE = "pyproject.toml"
METADATA_SECTION = "[tool.lstorage.prebuilt]"
METADATA_KEY = "libstorage"

logger = logging.getLogger(__name__)


def parse_metadata_version(text: str) -> Optional[str]:
    """Read the pinned library version from the metadata section of a manifest."""
    lines = text.splitlines()
    start = next(
        (index for index, line in enumerate(lines) if METADATA_SECTION in line), None
    )
    if start is None:
        return None
    for line in lines[start + 1 :]:
        if line.startswith("["):
            break
        if line.strip().startswith(METADATA_KEY):
            parts = line.split("=")
            if len(parts) < 2:
                return None
            value = parts[1].strip().strip('"')
            return value or None
    return None


def get_release_version(manifest_dir: Union[str, Path, None] = None) -> str:
    """Return the release to use.

    The environment variable wins, then the manifest metadata in
    ``manifest_dir``, then ``"latest"``.
    """
    version = os.environ.get(STORAGE_VERSION_VAR)
    if version is not None:
        logger.info("Using pinned version from environment: %s", version)
        return version

    if manifest_dir is not None:
        manifest_path = Path(manifest_dir) / MANIFEST_FILE
        try:
            content = manifest_path.read_text(encoding="utf-8")
        except OSError:
            logger.info("Failed to read %s", manifest_path)
        else:
            pinned = parse_metadata_version(content)
            if pinned is not None:
                logger.info("Using pinned version from manifest metadata: %s", pinned)
                return pinned
            logger.info("No version found in manifest metadata")

    logger.info("Using latest release")
    return LATEST