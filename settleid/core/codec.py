"""
settleid/core/codec.py

Field Codec — typed value → fixed-width bytes.

    u32           big-endian, unsigned                4 bytes
    u64           big-endian, unsigned                8 bytes
    i128          big-endian, two's complement       16 bytes
    address       canonical account bytes            32 bytes
    optional u64  value as u64, or 8 zero bytes       8 bytes

Every function either returns exactly its width or raises EncodingError.
No business rules here: a negative amount is a valid i128.
"""

from typing import Any, Callable, Dict, Optional

from settleid.core.address import ADDRESS_WIDTH, AddressLike, canonicalize_address
from settleid.core.exceptions import EncodingError


# Field kinds. The schema registry refers to fields only through these.
U32          = "u32"
U64          = "u64"
I128         = "i128"
ADDRESS      = "address"
OPTIONAL_U64 = "optional_u64"

FIELD_WIDTHS: Dict[str, int] = {
    U32:          4,
    U64:          8,
    I128:         16,
    ADDRESS:      ADDRESS_WIDTH,
    OPTIONAL_U64: 8,
}


def _require_int(value: Any, kind: str) -> int:
    # bool is an int subclass; True must not silently encode as 1.
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(
            f"{kind} value must be int",
            {"got": type(value).__name__},
        )
    return value


def _encode_int(value: Any, kind: str, signed: bool) -> bytes:
    value = _require_int(value, kind)
    try:
        return value.to_bytes(FIELD_WIDTHS[kind], "big", signed=signed)
    except OverflowError as exc:
        raise EncodingError(
            f"value out of range for {kind}",
            {"value": value},
        ) from exc


def encode_u32(value: int) -> bytes:
    return _encode_int(value, U32, signed=False)


def encode_u64(value: int) -> bytes:
    return _encode_int(value, U64, signed=False)


def encode_i128(value: int) -> bytes:
    """Two's complement, so -1 encodes as sixteen 0xff bytes."""
    return _encode_int(value, I128, signed=True)


def encode_address(value: AddressLike) -> bytes:
    return canonicalize_address(value)


def encode_optional_u64(value: Optional[int]) -> bytes:
    """
    None → 8 zero bytes. Otherwise identical to encode_u64.

    Consequence: encode_optional_u64(None) == encode_optional_u64(0).
    """
    if value is None:
        return bytes(FIELD_WIDTHS[OPTIONAL_U64])
    return _encode_int(value, OPTIONAL_U64, signed=False)


FIELD_ENCODERS: Dict[str, Callable[[Any], bytes]] = {
    U32:          encode_u32,
    U64:          encode_u64,
    I128:         encode_i128,
    ADDRESS:      encode_address,
    OPTIONAL_U64: encode_optional_u64,
}


def encode_field(kind: str, value: Any) -> bytes:
    """Dispatch on field kind. Unknown kinds are a layout bug, not bad input."""
    try:
        encoder = FIELD_ENCODERS[kind]
    except KeyError:
        raise EncodingError(f"unknown field kind '{kind}'") from None
    encoded = encoder(value)
    if len(encoded) != FIELD_WIDTHS[kind]:
        raise EncodingError(
            f"{kind} encoder produced wrong width",
            {"expected": FIELD_WIDTHS[kind], "got": len(encoded)},
        )
    return encoded
