"""Identifiers, manifest and quota records, upload progress readers and prebuilt-library retrieval for a decentralized storage engine."""

__version__ = "0.2.0"

__all__ = [
    "types",
    "storage_types",
    "upload_types",
    "streaming",
    "targets",
    "urls",
    "version",
    "checksum",
    "cache",
    "github",
    "download",
    "local",
    "remote",
    "prebuilt",
]