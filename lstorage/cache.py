"""Per-user cache of downloaded prebuilt libraries."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

import platformdirs

CACHE_DIR_NAME = "storage-bindings"
FORCE_DOWNLOAD_ENV_VAR = "STORAGE_BINDINGS_FORCE_DOWNLOAD"
CLEAN_CACHE_ENV_VAR = "STORAGE_BINDINGS_CLEAN_CACHE"
LIBSTORAGE_H = "libstorage.h"

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class CacheError(Exception):
    """The cache is missing or incomplete."""


def cache_base_dir() -> Path:
    """Return the platform cache directory for this package."""
    return Path(platformdirs.user_cache_dir()) / CACHE_DIR_NAME


def version_cache_dir(
    version: str, platform: str, base: Optional[PathLike] = None
) -> Path:
    """Return ``<base>/<version>/<platform>``, defaulting to the user cache."""
    root = Path(base) if base is not None else cache_base_dir()
    return root / version / platform


def should_force_download() -> bool:
    """True when a fresh download is requested through the environment."""
    return FORCE_DOWNLOAD_ENV_VAR in os.environ


def should_clean_cache() -> bool:
    """True when a cache cleanup is requested through the environment."""
    return CLEAN_CACHE_ENV_VAR in os.environ


def clean_cache(base: Optional[PathLike] = None) -> bool:
    """Remove the whole cache; return whether there was anything to remove."""
    root = Path(base) if base is not None else cache_base_dir()
    if not root.exists():
        logger.info("Cache directory does not exist, nothing to clean")
        return False
    logger.info("Removing cache directory: %s", root)
    shutil.rmtree(root)
    return True


def copy_from_cache(cache_dir: PathLike, out_dir: PathLike) -> list[str]:
    """Copy the regular files of ``cache_dir`` into ``out_dir``; return their names."""
    out = Path(out_dir)
    copied = []
    for path in sorted(Path(cache_dir).iterdir()):
        if path.is_file():
            shutil.copy(path, out / path.name)
            logger.info("Copied: %s", path.name)
            copied.append(path.name)
    return copied


def validate_cache(cache_dir: PathLike) -> None:
    """Raise CacheError unless ``cache_dir`` holds a ``.a`` library and the header."""
    directory = Path(cache_dir)
    if not directory.exists():
        raise CacheError("Cache directory does not exist")
    if not any(entry.suffix == ".a" for entry in directory.iterdir()):
        raise CacheError("No library files (.a) found in cache")
    if not (directory / LIBSTORAGE_H).exists():
        raise CacheError(f"Required header file {LIBSTORAGE_H} not found in cache")