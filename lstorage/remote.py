"""Download, verification and caching of prebuilt libraries from GitHub releases."""

from __future__ import annotations

import shutil
import tarfile
from pathlib import Path
from typing import Optional, Union

from lstorage import cache, checksum, github, targets
from lstorage.checksum import CHECKSUMS_FILE, ChecksumError
from lstorage.download import download_file
from lstorage.local import PrebuiltError, log_info, validate_required_files
from lstorage.version import get_release_version

PathLike = Union[str, Path]


def find_expected_checksum(content: str, asset_name: str) -> Optional[str]:
    """Return the checksum listed for ``asset_name`` in a checksums text, or None."""
    for line in content.splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[1] == asset_name:
            return parts[0]
    return None


def extract_archive(archive_path: PathLike, dest_dir: PathLike) -> list[str]:
    """Unpack a ``.tar.gz`` archive into ``dest_dir``; return the member names."""
    log_info(f"Extracting archive: {archive_path}")
    with tarfile.open(archive_path, "r:gz") as archive:
        names = archive.getnames()
        if hasattr(tarfile, "data_filter"):
            archive.extractall(dest_dir, filter="data")
        else:
            archive.extractall(dest_dir)
    log_info("Archive extraction completed")
    return names


def _try_use_cached_files(out_dir: Path, version: str, platform: str) -> Path:
    cache_dir = cache.version_cache_dir(version, platform)
    log_info(f"Checking cache: {cache_dir} (exists: {cache_dir.exists()})")
    if not cache_dir.exists():
        raise cache.CacheError("Cache directory not found")

    cache.validate_cache(cache_dir)
    log_info("Verifying checksums of cached files...")
    try:
        checksum.verify_all_checksums(cache_dir)
    except ChecksumError as exc:
        log_info(f"Checksum verification failed for cached files: {exc}")
        log_info("Re-downloading prebuilt binaries...")
        shutil.rmtree(cache_dir, ignore_errors=True)
        raise ChecksumError("Checksum verification failed") from exc

    cache.copy_from_cache(cache_dir, out_dir)
    log_info(f"Using cached directory: {out_dir}")
    return out_dir


def _download_and_extract_binaries(out_dir: Path, platform: str, version: str) -> None:
    log_info(f"Fetching release {version} from GitHub...")
    release = github.fetch_release(version)
    log_info(f"Release fetched: {release.tag_name} ({len(release.assets)} assets)")

    asset = github.find_matching_asset(release, platform)
    if asset is None:
        raise PrebuiltError(
            f"No prebuilt binary found for platform: {platform} in release: "
            f"{release.tag_name}. Please check the GitHub releases page for "
            "available platforms."
        )
    log_info(f"Found matching asset: {asset.name} ({asset.browser_download_url})")

    temp_archive = out_dir / f"{platform}.tar.gz"
    download_file(asset.browser_download_url, temp_archive)

    checksums_content = github.fetch_checksums_file(version)
    expected = find_expected_checksum(checksums_content, asset.name)
    if expected is None:
        raise ChecksumError(f"Checksum not found for {asset.name} in {CHECKSUMS_FILE}")
    log_info(f"Found expected checksum: {expected}")

    checksum.verify_archive_checksum(temp_archive, expected)
    extract_archive(temp_archive, out_dir)
    temp_archive.unlink()

    log_info("Verifying checksums of extracted files...")
    checksum.verify_all_checksums(out_dir)


def _save_to_cache(out_dir: Path, version: str, platform: str) -> None:
    cache_dir = cache.version_cache_dir(version, platform)
    log_info(f"Saving to cache: {cache_dir}")
    cache_dir.mkdir(parents=True, exist_ok=True)
    for path in sorted(out_dir.iterdir()):
        if path.is_file():
            shutil.copy(path, cache_dir / path.name)
            log_info(f"  Cached: {path.name}")


def download_from_github(out_dir: PathLike, target: str) -> Path:
    """Make the prebuilt library for ``target`` available in ``out_dir``.

    Uses the per-user cache when it holds a verified copy, unless a fresh
    download is requested through the environment.
    """
    out = Path(out_dir)
    platform = targets.map_target_to_platform(target)
    if platform is None:
        supported = ", ".join(targets.supported_targets())
        raise PrebuiltError(
            f"Unsupported target: {target}. Supported platforms: {supported}."
        )
    log_info(f"Mapped target to platform: {platform}")

    version = get_release_version()

    if cache.should_force_download():
        log_info("Force download requested, skipping cache")
        _download_and_extract_binaries(out, platform, version)
        validate_required_files(out)
        return out

    try:
        return _try_use_cached_files(out, version, platform)
    except (cache.CacheError, ChecksumError, OSError):
        pass

    _download_and_extract_binaries(out, platform, version)
    validate_required_files(out)
    _save_to_cache(out, version, platform)
    log_info("Successfully extracted and cached prebuilt binaries")
    return out