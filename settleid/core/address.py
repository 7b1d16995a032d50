"""
settleid/core/address.py

Account address canonicalizer.

The canonical form of an account is the raw 32-byte Ed25519 public key the
ledger uses internally as the account identity. Everything accepted from the
outside (strkey text, raw bytes, cryptography key objects) is reduced to
those 32 bytes here and nowhere else.

Strkey wire format (Stellar account IDs, "G..."):
    payload  = version_byte (6 << 3) || 32-byte ed25519 key
    checksum = CRC16-XModem(payload), little-endian
    text     = base32(payload || checksum), RFC 4648 alphabet, no padding
    length   = 35 bytes → exactly 56 characters

Only account keys are canonical here. Contract ("C..."), muxed ("M...")
and secret seed ("S...") strkeys are rejected.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Union

from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from settleid.core.exceptions import EncodingError


ADDRESS_WIDTH = 32

_VERSION_ACCOUNT_ID = 6 << 3    # 'G'
_VERSION_MUXED      = 12 << 3   # 'M'
_VERSION_SEED       = 18 << 3   # 'S'
_VERSION_CONTRACT   = 2 << 3    # 'C'

_STRKEY_LENGTH = 56

_REJECTED_VERSIONS = {
    _VERSION_MUXED:    "muxed account",
    _VERSION_SEED:     "secret seed",
    _VERSION_CONTRACT: "contract",
}


def _crc16_xmodem(data: bytes) -> bytes:
    # binascii.crc_hqx with a zero initial value is CRC16-XModem.
    return binascii.crc_hqx(data, 0).to_bytes(2, "little")


@dataclass(frozen=True)
class AccountAddress:
    """
    A resolved, validated account identity in canonical form.

    Construct through the classmethods; the raw bytes are checked for
    width on every path.
    """

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise EncodingError(
                "address bytes must be bytes",
                {"got": type(self.raw).__name__},
            )
        if len(self.raw) != ADDRESS_WIDTH:
            raise EncodingError(
                f"address must be exactly {ADDRESS_WIDTH} bytes",
                {"got": len(self.raw)},
            )
        object.__setattr__(self, "raw", bytes(self.raw))

    # ── Construction ──────────────────────────────────────────

    @classmethod
    def from_bytes(cls, raw: bytes) -> "AccountAddress":
        return cls(raw)

    @classmethod
    def from_strkey(cls, text: str) -> "AccountAddress":
        """
        Decode a "G..." account strkey.

        Raises EncodingError for any non-canonical text: lowercase, padding,
        wrong length, bad checksum, or a version byte other than account.
        """
        if not isinstance(text, str):
            raise EncodingError(
                "strkey must be str",
                {"got": type(text).__name__},
            )
        if len(text) != _STRKEY_LENGTH:
            raise EncodingError(
                f"strkey must be exactly {_STRKEY_LENGTH} characters",
                {"got": len(text)},
            )
        if text != text.upper():
            raise EncodingError(
                "strkey is not canonical: lowercase characters",
                {"strkey": text},
            )
        try:
            decoded = base64.b32decode(text.encode("ascii"))
        except (binascii.Error, ValueError, UnicodeEncodeError) as exc:
            raise EncodingError(
                f"strkey is not valid base32: {exc}",
                {"strkey": text},
            ) from exc

        payload, checksum = decoded[:-2], decoded[-2:]
        if _crc16_xmodem(payload) != checksum:
            raise EncodingError("strkey checksum mismatch", {"strkey": text})

        version = payload[0]
        if version in _REJECTED_VERSIONS:
            raise EncodingError(
                f"{_REJECTED_VERSIONS[version]} strkey is not an account address",
                {"strkey": text},
            )
        if version != _VERSION_ACCOUNT_ID:
            raise EncodingError(
                "unknown strkey version byte",
                {"version": version},
            )
        return cls(payload[1:])

    @classmethod
    def from_public_key(cls, public_key: Ed25519PublicKey) -> "AccountAddress":
        return cls(public_key.public_bytes(Encoding.Raw, PublicFormat.Raw))

    @classmethod
    def from_seed(cls, seed: bytes) -> "AccountAddress":
        """
        Derive the account for a raw 32-byte Ed25519 seed.
        Used to build reproducible test-vector addresses.
        """
        if len(seed) != 32:
            raise EncodingError(
                "Ed25519 seed must be 32 bytes",
                {"got": len(seed)},
            )
        private_key = Ed25519PrivateKey.from_private_bytes(seed)
        return cls.from_public_key(private_key.public_key())

    # ── Rendering ─────────────────────────────────────────────

    @property
    def strkey(self) -> str:
        payload = bytes([_VERSION_ACCOUNT_ID]) + self.raw
        return base64.b32encode(payload + _crc16_xmodem(payload)).decode("ascii")

    def __str__(self) -> str:
        return self.strkey

    def __repr__(self) -> str:
        return f"AccountAddress({self.strkey})"


AddressLike = Union[AccountAddress, str, bytes, Ed25519PublicKey]


def canonicalize_address(value: AddressLike) -> bytes:
    """
    Reduce any accepted address representation to its 32 canonical bytes.

    Accepts:
        AccountAddress     → .raw
        str                → "G..." strkey
        bytes / bytearray  → must already be 32 raw bytes
        Ed25519PublicKey   → raw public key bytes

    Raises EncodingError for anything else.
    """
    if isinstance(value, AccountAddress):
        return value.raw
    if isinstance(value, str):
        return AccountAddress.from_strkey(value).raw
    if isinstance(value, (bytes, bytearray)):
        return AccountAddress.from_bytes(value).raw
    if isinstance(value, Ed25519PublicKey):
        return AccountAddress.from_public_key(value).raw
    raise EncodingError(
        "unsupported address representation",
        {"got": type(value).__name__},
    )
