"""Manifest and storage-space records, and parsing of the node's JSON replies."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from lstorage.types import InvalidParameterError

_IEC_PREFIXES = "KMGTPE"


class StorageDataError(Exception):
    """A reply from the storage node could not be understood."""


def format_size(num_bytes: int) -> str:
    """Render a byte count with binary (IEC) units, e.g. ``1.5 KiB``."""
    unit = 1024
    if num_bytes < unit:
        return f"{num_bytes} B"
    exponent = 0
    scaled = num_bytes
    while scaled >= unit and exponent < len(_IEC_PREFIXES):
        scaled //= unit
        exponent += 1
    value = num_bytes / unit**exponent
    return f"{value:.1f} {_IEC_PREFIXES[exponent - 1]}iB"


def require_cid(cid: str) -> str:
    """Return ``cid`` unchanged, or raise if it is empty."""
    if not cid:
        raise InvalidParameterError("cid", "CID cannot be empty")
    return cid


def _get_str(data: dict, key: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise StorageDataError(f"invalid type for `{key}`: expected a string")
    return value


def _get_bool(data: dict, key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise StorageDataError(f"invalid type for `{key}`: expected a boolean")
    return value


def _get_count(data: dict, key: str) -> int:
    if key not in data:
        raise StorageDataError(f"missing field `{key}`")
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise StorageDataError(f"invalid value for `{key}`: expected a non-negative integer")
    return value


def _require_object(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise StorageDataError(f"expected an object for {what}")
    return data


@dataclass
class Manifest:
    """Description of a stored dataset."""

    cid: str = ""
    tree_cid: str = ""
    dataset_size: int = 0
    block_size: int = 0
    filename: str = ""
    mimetype: str = ""
    protected: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Manifest":
        """Build a manifest from the node's JSON object; the CID is left empty."""
        data = _require_object(data, "manifest")
        return cls(
            tree_cid=_get_str(data, "treeCid"),
            dataset_size=_get_count(data, "datasetSize"),
            block_size=_get_count(data, "blockSize"),
            filename=_get_str(data, "filename"),
            mimetype=_get_str(data, "mimetype"),
            protected=_get_bool(data, "protected"),
        )

    def to_dict(self) -> dict:
        """Return the JSON object form, without the CID."""
        return {
            "treeCid": self.tree_cid,
            "datasetSize": self.dataset_size,
            "blockSize": self.block_size,
            "filename": self.filename,
            "mimetype": self.mimetype,
            "protected": self.protected,
        }

    def estimated_blocks(self) -> int:
        """Number of blocks needed to hold the dataset."""
        if self.block_size == 0:
            return 0
        return -(-self.dataset_size // self.block_size)

    def is_file(self) -> bool:
        """True when the manifest carries a filename."""
        return bool(self.filename)

    def is_directory(self) -> bool:
        """True for unnamed, non-empty data."""
        return not self.filename and self.dataset_size > 0

    def file_extension(self) -> str | None:
        """Lower-cased extension of the filename, if any."""
        if not self.is_file():
            return None
        dot = self.filename.rfind(".")
        if dot < 0:
            return None
        return self.filename[dot + 1 :].lower()

    def size_string(self) -> str:
        """Human-readable dataset size."""
        return format_size(self.dataset_size)


@dataclass
class Space:
    """Storage quota figures reported by a node."""

    total_blocks: int = 0
    quota_max_bytes: int = 0
    quota_used_bytes: int = 0
    quota_reserved_bytes: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "Space":
        """Build from the node's JSON object; every field is required."""
        data = _require_object(data, "space info")
        return cls(
            total_blocks=_get_count(data, "totalBlocks"),
            quota_max_bytes=_get_count(data, "quotaMaxBytes"),
            quota_used_bytes=_get_count(data, "quotaUsedBytes"),
            quota_reserved_bytes=_get_count(data, "quotaReservedBytes"),
        )

    def to_dict(self) -> dict:
        """Return the JSON object form."""
        return {
            "totalBlocks": self.total_blocks,
            "quotaMaxBytes": self.quota_max_bytes,
            "quotaUsedBytes": self.quota_used_bytes,
            "quotaReservedBytes": self.quota_reserved_bytes,
        }

    def available_bytes(self) -> int:
        """Bytes left under the quota, never negative."""
        return max(self.quota_max_bytes - self.quota_used_bytes, 0)

    def usage_percentage(self) -> float:
        """Used fraction of the quota, 0.0 when there is no quota."""
        if self.quota_max_bytes == 0:
            return 0.0
        return self.quota_used_bytes / self.quota_max_bytes

    def reserved_percentage(self) -> float:
        """Reserved fraction of the quota, 0.0 when there is no quota."""
        if self.quota_max_bytes == 0:
            return 0.0
        return self.quota_reserved_bytes / self.quota_max_bytes

    def is_nearly_full(self) -> bool:
        """True above 90% usage."""
        return self.usage_percentage() > 0.9

    def is_critically_full(self) -> bool:
        """True above 95% usage."""
        return self.usage_percentage() > 0.95

    def quota_max_string(self) -> str:
        return format_size(self.quota_max_bytes)

    def quota_used_string(self) -> str:
        return format_size(self.quota_used_bytes)

    def available_string(self) -> str:
        return format_size(self.available_bytes())


def _load_json(text: str, what: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StorageDataError(f"Failed to parse {what}: {exc}") from exc


def parse_manifest(text: str, cid: str = "") -> Manifest:
    """Parse a fetched manifest and attach ``cid`` to it."""
    data = _load_json(text, "manifest")
    try:
        manifest = Manifest.from_dict(data)
    except StorageDataError as exc:
        raise StorageDataError(f"Failed to parse manifest: {exc}") from exc
    manifest.cid = cid
    return manifest


def parse_manifest_list(text: str) -> list[Manifest]:
    """Parse the node's list of ``{"cid", "manifest"}`` entries."""
    data = _load_json(text, "manifests")
    if not isinstance(data, list):
        raise StorageDataError("Failed to parse manifests: expected a list")
    manifests = []
    try:
        for entry in data:
            entry = _require_object(entry, "manifest entry")
            if "cid" not in entry:
                raise StorageDataError("missing field `cid`")
            cid = entry["cid"]
            if not isinstance(cid, str):
                raise StorageDataError("invalid type for `cid`: expected a string")
            if "manifest" not in entry:
                raise StorageDataError("missing field `manifest`")
            manifest = Manifest.from_dict(entry["manifest"])
            manifest.cid = cid
            manifests.append(manifest)
    except StorageDataError as exc:
        raise StorageDataError(f"Failed to parse manifests: {exc}") from exc
    return manifests


def parse_space(text: str) -> Space:
    """Parse the node's storage-space reply."""
    data = _load_json(text, "space info")
    try:
        return Space.from_dict(data)
    except StorageDataError as exc:
        raise StorageDataError(f"Failed to parse space info: {exc}") from exc


def parse_exists(text: str) -> bool:
    """Parse the literal ``true`` or ``false`` returned by an existence check."""
    if text == "true":
        return True
    if text == "false":
        return False
    raise StorageDataError(
        "Failed to parse exists result: provided string was not `true` or `false`"
    )