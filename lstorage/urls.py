"""Locations and HTTP settings for fetching prebuilt releases."""

from __future__ import annotations

GITHUB_REPO_OWNER = "nipsysdev"
GITHUB_REPO_NAME = "logos-storage-nim-bin"
GITHUB_API_BASE = "https://api.github.com/repos"

USER_AGENT = "lstorage"

API_TIMEOUT_SECONDS = 30
DOWNLOAD_TIMEOUT_SECONDS = 900
DOWNLOAD_BUFFER_SIZE = 8192

LATEST = "latest"


def _releases_base() -> str:
    return f"{GITHUB_API_BASE}/{GITHUB_REPO_OWNER}/{GITHUB_REPO_NAME}/releases"


def latest_release_url() -> str:
    """API URL describing the latest stable release."""
    return f"{_releases_base()}/latest"


def tagged_release_url(version: str) -> str:
    """API URL describing the release tagged ``version``."""
    return f"{_releases_base()}/tags/{version}"


def release_url(version: str) -> str:
    """API URL for ``version``, where ``"latest"`` means the latest stable release."""
    if version == LATEST:
        return latest_release_url()
    return tagged_release_url(version)