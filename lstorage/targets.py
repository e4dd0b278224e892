"""Supported build targets and the platform names of their prebuilt archives."""

from __future__ import annotations

from typing import Optional

# To support another platform, add its target triple here together with the
# platform identifier used in the names of the published release archives.
SUPPORTED_TARGETS: tuple[tuple[str, str], ...] = (
    ("x86_64-unknown-linux-gnu", "linux-amd64"),
    ("aarch64-unknown-linux-gnu", "linux-arm64"),
    ("aarch64-apple-darwin", "darwin-arm64"),
    ("x86_64-apple-darwin", "darwin-amd64"),
)


def supported_targets() -> list[str]:
    """Return every supported target triple, in declaration order."""
    return [target for target, _ in SUPPORTED_TARGETS]


def map_target_to_platform(target: str) -> Optional[str]:
    """Return the platform identifier for ``target``, or None if it is unsupported."""
    return next(
        (platform for known, platform in SUPPORTED_TARGETS if known == target),
        None,
    )