"""
settleid/core/models.py

Settlement ID Data Model

═══════════════════════════════════════════════════════════════════
CONTRACTS
═══════════════════════════════════════════════════════════════════

CONTRACT 1 — Input
    RemittanceFingerprintInput is frozen. Build it once from already
    persisted, already validated record fields and never mutate it.

CONTRACT 2 — Output
    SettlementId is exactly 32 raw bytes. The raw bytes are the value.
    Text interfaces (CLI, JSON, logs) render it as 64 lowercase hex chars.

CONTRACT 3 — JSON form
    Integers travel as decimal strings. i128 and u64 do not fit the
    2^53 safe-integer range of most JSON parsers. from_dict() accepts
    either JSON integers or decimal strings; to_dict() always emits strings.
    expiry is null when absent. Addresses are "G..." strkeys.
═══════════════════════════════════════════════════════════════════
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from settleid.core.address import AccountAddress, AddressLike, canonicalize_address
from settleid.core.exceptions import InvalidInput
from settleid.core.schema import CURRENT_SCHEMA_VERSION


SETTLEMENT_ID_LENGTH = 32

_HEX_ID_RE  = re.compile(r"[0-9a-fA-F]{64}")
# i128 needs at most 39 digits; anything longer is out of range for every field
# and never reaches int(), which caps string conversion length.
_DECIMAL_RE = re.compile(r"-?[0-9]{1,40}")


def _parse_int(data: Dict[str, Any], key: str) -> int:
    if key not in data:
        raise InvalidInput(f"missing field '{key}'")
    value = data[key]
    if isinstance(value, bool):
        raise InvalidInput(f"field '{key}' must be an integer", {"got": "bool"})
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DECIMAL_RE.fullmatch(value):
        return int(value)
    raise InvalidInput(
        f"field '{key}' must be an integer or decimal string",
        {"got": repr(value)},
    )


@dataclass(frozen=True)
class RemittanceFingerprintInput:
    """
    The immutable tuple a Settlement ID is computed from.

    sender/agent may be any representation the address canonicalizer
    accepts; the codec reduces them to canonical bytes at encode time.
    """

    remittance_id:  int
    sender:         AddressLike
    agent:          AddressLike
    amount:         int
    fee:            int
    expiry:         Optional[int] = None
    schema_version: int = CURRENT_SCHEMA_VERSION

    def __post_init__(self) -> None:
        for name in ("sender", "agent"):
            value = getattr(self, name)
            if isinstance(value, bytearray):
                object.__setattr__(self, name, bytes(value))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemittanceFingerprintInput":
        """
        Deserialize from the JSON form used by vector files and the CLI.
        Raises InvalidInput on missing or malformed fields.
        """
        if not isinstance(data, dict):
            raise InvalidInput(
                "fingerprint input must be a JSON object",
                {"got": type(data).__name__},
            )
        for key in ("sender", "agent"):
            if not isinstance(data.get(key), str):
                raise InvalidInput(f"field '{key}' must be a strkey string")

        expiry = None
        if data.get("expiry") is not None:
            expiry = _parse_int(data, "expiry")

        schema_version = CURRENT_SCHEMA_VERSION
        if data.get("schema_version") is not None:
            schema_version = _parse_int(data, "schema_version")

        return cls(
            remittance_id=  _parse_int(data, "remittance_id"),
            sender=         data["sender"],
            agent=          data["agent"],
            amount=         _parse_int(data, "amount"),
            fee=            _parse_int(data, "fee"),
            expiry=         expiry,
            schema_version= schema_version,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": str(self.schema_version),
            "remittance_id":  str(self.remittance_id),
            "sender":         _render_address(self.sender),
            "agent":          _render_address(self.agent),
            "amount":         str(self.amount),
            "fee":            str(self.fee),
            "expiry":         None if self.expiry is None else str(self.expiry),
        }

    def field_values(self) -> Dict[str, Any]:
        """Values keyed by layout field name, in no particular order."""
        return {
            "schema_version": self.schema_version,
            "remittance_id":  self.remittance_id,
            "sender":         self.sender,
            "agent":          self.agent,
            "amount":         self.amount,
            "fee":            self.fee,
            "expiry":         self.expiry,
        }


def _render_address(value: AddressLike) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, AccountAddress):
        return value.strkey
    return AccountAddress(canonicalize_address(value)).strkey


@dataclass(frozen=True)
class SettlementId:
    """A 32-byte Settlement ID. Compared by exact byte equality."""

    digest: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.digest, (bytes, bytearray)):
            raise InvalidInput(
                "settlement id must be bytes",
                {"got": type(self.digest).__name__},
            )
        if len(self.digest) != SETTLEMENT_ID_LENGTH:
            raise InvalidInput(
                f"settlement id must be exactly {SETTLEMENT_ID_LENGTH} bytes",
                {"got": len(self.digest)},
            )
        object.__setattr__(self, "digest", bytes(self.digest))

    @classmethod
    def from_hex(cls, text: str) -> "SettlementId":
        """Parse 64 hex characters. Either case accepted; no 0x prefix."""
        if not isinstance(text, str) or not _HEX_ID_RE.fullmatch(text):
            raise InvalidInput(
                "settlement id must be exactly 64 hex characters",
                {"got": repr(text)},
            )
        return cls(bytes.fromhex(text))

    @classmethod
    def coerce(cls, value: Union["SettlementId", bytes, str]) -> "SettlementId":
        """Accept a SettlementId, 32 raw bytes, or 64 hex characters."""
        if isinstance(value, SettlementId):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(value)
        if isinstance(value, str):
            return cls.from_hex(value)
        raise InvalidInput(
            "unsupported settlement id representation",
            {"got": type(value).__name__},
        )

    def hex(self) -> str:
        return self.digest.hex()

    def __bytes__(self) -> bytes:
        return self.digest

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"SettlementId({self.hex()})"
