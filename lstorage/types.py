"""Validated identifiers used by the storage network: CIDs, peer IDs and multiaddresses."""

from __future__ import annotations

import string
from dataclasses import dataclass

_BASE58_ALPHABET = frozenset(
    "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
)
_CID_BODY_CHARS = frozenset(string.ascii_letters + "234567=")


class InvalidParameterError(ValueError):
    """An argument handed to a storage operation was rejected."""

    def __init__(self, parameter: str, message: str) -> None:
        self.parameter = parameter
        self.message = message
        super().__init__(f"Invalid parameter '{parameter}': {message}")


class _DetailError(ValueError):
    prefix = "Invalid value"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class CidError(_DetailError):
    """A string could not be read as a CID."""

    prefix = "Invalid CID"


class CidFormatError(CidError):
    """The CID does not have the expected shape."""

    prefix = "Invalid CID format"


class CidEncodingError(CidError):
    """The CID body is not valid base32."""

    prefix = "Invalid CID encoding"


class PeerIdError(_DetailError):
    """A string could not be read as a peer ID."""

    prefix = "Invalid Peer ID encoding"


class MultiAddrError(_DetailError):
    """A string could not be read as a multiaddress."""

    prefix = "Invalid MultiAddress format"


def is_valid_base58(text: str) -> bool:
    """Return True if ``text`` is non-empty and uses only the base58 alphabet."""
    return bool(text) and all(ch in _BASE58_ALPHABET for ch in text)


@dataclass(frozen=True)
class Cid:
    """Content identifier (CIDv1, base32 with a ``z`` prefix)."""

    value: str

    @classmethod
    def parse(cls, text: str) -> "Cid":
        """Validate ``text`` and wrap it as a CID."""
        if not text.startswith("z"):
            raise CidFormatError("CID must start with 'z'")
        if len(text) < 2:
            raise CidFormatError("CID is too short")
        if not all(ch in _CID_BODY_CHARS for ch in text[1:]):
            raise CidEncodingError("Invalid base32 encoding")
        return cls(text)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PeerId:
    """Identifier of a peer in the network (base58)."""

    value: str

    @classmethod
    def parse(cls, text: str) -> "PeerId":
        """Validate ``text`` and wrap it as a peer ID."""
        if not is_valid_base58(text):
            raise PeerIdError("Invalid base58 encoding")
        return cls(text)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class MultiAddress:
    """Network address in multiaddr notation."""

    value: str

    @classmethod
    def parse(cls, text: str) -> "MultiAddress":
        """Validate ``text`` and wrap it as a multiaddress."""
        if not text.startswith("/"):
            raise MultiAddrError("MultiAddress must start with '/'")
        return cls(text)

    def __str__(self) -> str:
        return self.value