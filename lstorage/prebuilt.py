"""Entry point that makes the prebuilt storage library available."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from lstorage.local import PrebuiltError, log_info, try_local_development_mode
from lstorage.remote import download_from_github


def ensure_prebuilt_binary(out_dir: Union[str, Path], target: str) -> Path:
    """Place the library for ``target`` in ``out_dir``.

    Local libraries named by the environment take precedence; otherwise the
    release archive is fetched (or taken from the cache).
    """
    log_info(f"Target: {target}")
    log_info(f"Output directory: {out_dir}")
    try:
        return try_local_development_mode(out_dir)
    except (PrebuiltError, OSError):
        pass
    return download_from_github(out_dir, target)