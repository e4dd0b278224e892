"""Release lookup on the GitHub API for the prebuilt library archives."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

import requests

from lstorage.checksum import CHECKSUMS_FILE
from lstorage.urls import API_TIMEOUT_SECONDS, USER_AGENT, release_url

logger = logging.getLogger(__name__)


class GitHubError(Exception):
    """The release information could not be fetched or understood."""


@dataclass(frozen=True)
class GitHubAsset:
    """A file attached to a release."""

    name: str
    browser_download_url: str


@dataclass(frozen=True)
class GitHubRelease:
    """A published release and its assets."""

    tag_name: str
    assets: list[GitHubAsset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "GitHubRelease":
        """Build a release from the API's JSON object."""
        if not isinstance(data, dict):
            raise GitHubError("expected a JSON object for the release")
        tag_name = data.get("tag_name")
        if not isinstance(tag_name, str):
            raise GitHubError("missing or invalid field `tag_name`")
        assets = data.get("assets")
        if not isinstance(assets, list):
            raise GitHubError("missing or invalid field `assets`")
        return cls(tag_name=tag_name, assets=[_asset_from_dict(item) for item in assets])


def _asset_from_dict(data: object) -> GitHubAsset:
    if not isinstance(data, dict):
        raise GitHubError("expected a JSON object for a release asset")
    name = data.get("name")
    url = data.get("browser_download_url")
    if not isinstance(name, str):
        raise GitHubError("missing or invalid field `name`")
    if not isinstance(url, str):
        raise GitHubError("missing or invalid field `browser_download_url`")
    return GitHubAsset(name=name, browser_download_url=url)


def _status_text(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


@contextmanager
def _session() -> Iterator[requests.Session]:
    with requests.Session() as session:
        session.headers["User-Agent"] = USER_AGENT
        yield session


def _get(session: requests.Session, url: str) -> requests.Response:
    try:
        return session.get(url, timeout=API_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise GitHubError(f"Request to {url} failed: {exc}") from exc


def _get_release(session: requests.Session, version: str) -> GitHubRelease:
    url = release_url(version)
    logger.info("Fetching release %s from %s", version, url)
    response = _get(session, url)
    if not _is_success(response):
        raise GitHubError(f"GitHub API returned status: {_status_text(response)}")
    try:
        data = response.json()
    except ValueError as exc:
        raise GitHubError(f"Invalid JSON in release response: {exc}") from exc
    return GitHubRelease.from_dict(data)


def fetch_release(version: str) -> GitHubRelease:
    """Fetch the release ``version``; ``"latest"`` means the latest stable release."""
    with _session() as session:
        release = _get_release(session, version)
    logger.info("Release %s has %d assets", release.tag_name, len(release.assets))
    for index, asset in enumerate(release.assets, start=1):
        logger.debug("Asset %d: %s", index, asset.name)
    return release


def find_matching_asset(release: GitHubRelease, platform: str) -> Optional[GitHubAsset]:
    """Return the first asset whose name contains ``linux-<platform>``, or None."""
    pattern = "linux-" + platform.replace("linux-", "")
    match = next((asset for asset in release.assets if pattern in asset.name), None)
    if match is None:
        logger.warning(
            "No asset matching %s; available: %s",
            pattern,
            ", ".join(asset.name for asset in release.assets),
        )
    else:
        logger.info("Found matching asset: %s", match.name)
    return match


def fetch_checksums_file(version: str) -> str:
    """Download the text of the checksums file attached to release ``version``."""
    with _session() as session:
        release = _get_release(session, version)
        asset = next(
            (item for item in release.assets if item.name == CHECKSUMS_FILE), None
        )
        if asset is None:
            raise GitHubError(f"{CHECKSUMS_FILE} not found in release assets")
        response = _get(session, asset.browser_download_url)
        if not _is_success(response):
            raise GitHubError(
                f"Failed to download {CHECKSUMS_FILE}: {_status_text(response)}"
            )
        content = response.text
    logger.info("Downloaded %s (%d bytes)", CHECKSUMS_FILE, len(content))
    return content