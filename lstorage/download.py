"""Streaming download of release archives to disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import requests

from lstorage.urls import DOWNLOAD_BUFFER_SIZE, DOWNLOAD_TIMEOUT_SECONDS, USER_AGENT

logger = logging.getLogger(__name__)


class DownloadError(Exception):
    """A file could not be downloaded."""


def _content_length(response: requests.Response) -> int:
    try:
        return int(response.headers.get("Content-Length") or 0)
    except ValueError:
        return 0


def download_file(url: str, dest_path: Union[str, Path]) -> int:
    """Download ``url`` into ``dest_path`` and return the number of bytes written."""
    logger.info("Downloading %s to %s", url, dest_path)
    downloaded = 0
    try:
        with requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=DOWNLOAD_TIMEOUT_SECONDS,
            stream=True,
        ) as response:
            if not 200 <= response.status_code < 300:
                status = f"{response.status_code} {response.reason or ''}".strip()
                raise DownloadError(f"Download failed with status: {status}")
            total = _content_length(response)
            with open(dest_path, "wb") as dest:
                for block in response.iter_content(chunk_size=DOWNLOAD_BUFFER_SIZE):
                    if not block:
                        continue
                    dest.write(block)
                    downloaded += len(block)
                    if total > 0:
                        logger.debug(
                            "Progress: %.1f%% (%d/%d bytes)",
                            downloaded / total * 100.0,
                            downloaded,
                            total,
                        )
                    else:
                        logger.debug("Downloaded: %d bytes", downloaded)
    except requests.RequestException as exc:
        raise DownloadError(f"Download of {url} failed: {exc}") from exc
    logger.info("Copied %d bytes", downloaded)
    return downloaded