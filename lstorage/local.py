"""Use of locally built libraries instead of downloaded ones."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Union

from lstorage.cache import LIBSTORAGE_H

LOCAL_LIBS_ENV_VAR = "STORAGE_BINDINGS_LOCAL_LIBS"

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PrebuiltError(Exception):
    """The prebuilt library could not be made available."""


def log_info(message: str) -> None:
    """Log a progress message of the prebuilt-library setup."""
    logger.info("%s", message)


def validate_required_files(path: PathLike) -> None:
    """Raise PrebuiltError unless ``path`` holds a ``.a`` library and the header."""
    directory = Path(path)
    if not any(entry.suffix == ".a" for entry in directory.iterdir()):
        raise PrebuiltError("No library files (.a) found in the directory.")
    header = directory / LIBSTORAGE_H
    if not header.exists():
        raise PrebuiltError(
            f"Required header file not found: {header}. "
            f"Please ensure the folder contains {LIBSTORAGE_H}"
        )


def _copy_all_files(local_path: Path, out_dir: Path) -> None:
    log_info("Copying all files from local path to output directory...")
    for path in sorted(local_path.iterdir()):
        if path.is_file():
            shutil.copy(path, out_dir / path.name)
            log_info(f"  Copied: {path.name}")


def try_local_development_mode(out_dir: PathLike) -> Path:
    """Copy libraries from the directory named by the environment into ``out_dir``.

    Raises PrebuiltError when the variable is unset, names a missing
    directory, or the directory lacks the required files.
    """
    local_libs = os.environ.get(LOCAL_LIBS_ENV_VAR)
    if local_libs is None:
        log_info("Local development mode not enabled")
        raise PrebuiltError("Local development mode not enabled")

    log_info("Local development mode detected")
    log_info(f"Local libs path: {local_libs}")
    local_path = Path(local_libs)
    if not local_path.exists():
        raise PrebuiltError(
            f"Local library path does not exist: {local_libs}. "
            f"Please check the {LOCAL_LIBS_ENV_VAR} environment variable."
        )

    validate_required_files(local_path)
    log_info(f"Using local libraries from: {local_libs}")

    out = Path(out_dir)
    _copy_all_files(local_path, out)
    log_info("Local libraries copied successfully")
    return out