"""
settleid/core/schema.py

Schema Layout Registry

THE LAYOUTS BELOW ARE FROZEN.
A layout is never edited in place. Any change to field order, field width,
field set or hash algorithm is a NEW schema_version with a NEW entry here.
Old entries stay forever so that old Settlement IDs remain re-verifiable.

═══════════════════════════════════════════════════════════════════
SCHEMA 1
═══════════════════════════════════════════════════════════════════
    [0..4)      schema_version  u32 BE = 1
    [4..12)     remittance_id   u64 BE
    [12..44)    sender          32-byte ed25519 account key
    [44..76)    agent           32-byte ed25519 account key
    [76..92)    amount          i128 BE two's complement
    [92..108)   fee             i128 BE two's complement
    [108..116)  expiry          u64 BE, 8 zero bytes if absent

    total   = 52 + 2W = 116 bytes
    digest  = SHA-256(buffer), raw 32 bytes
═══════════════════════════════════════════════════════════════════
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import List, Mapping, Tuple

from settleid.core.codec import (
    ADDRESS,
    FIELD_WIDTHS,
    I128,
    OPTIONAL_U64,
    U32,
    U64,
)
from settleid.core.exceptions import SchemaVersionMismatch


@dataclass(frozen=True)
class FieldSpec:
    name: str
    kind: str

    @property
    def width(self) -> int:
        return FIELD_WIDTHS[self.kind]


@dataclass(frozen=True)
class FieldOffset:
    """Byte range [start, end) of one field inside the canonical buffer."""
    name:  str
    kind:  str
    start: int
    end:   int


@dataclass(frozen=True)
class SchemaLayout:
    version:        int
    fields:         Tuple[FieldSpec, ...]
    hash_algorithm: str

    @property
    def total_length(self) -> int:
        return sum(f.width for f in self.fields)

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def offsets(self) -> List[FieldOffset]:
        result: List[FieldOffset] = []
        cursor = 0
        for spec in self.fields:
            result.append(FieldOffset(spec.name, spec.kind, cursor, cursor + spec.width))
            cursor += spec.width
        return result


SCHEMA_V1 = SchemaLayout(
    version=1,
    fields=(
        FieldSpec("schema_version", U32),
        FieldSpec("remittance_id",  U64),
        FieldSpec("sender",         ADDRESS),
        FieldSpec("agent",          ADDRESS),
        FieldSpec("amount",         I128),
        FieldSpec("fee",            I128),
        FieldSpec("expiry",         OPTIONAL_U64),
    ),
    hash_algorithm="sha256",
)

CURRENT_SCHEMA_VERSION = 1

# Read-only view. Built once at import time, never mutated.
SCHEMA_LAYOUTS: Mapping[int, SchemaLayout] = MappingProxyType({
    SCHEMA_V1.version: SCHEMA_V1,
})


def get_layout(schema_version: int) -> SchemaLayout:
    """
    Resolve the frozen layout for a schema version.

    Raises SchemaVersionMismatch for any version not in the registry.
    There is no fallback: a caller asking for version 2 on a build that
    only knows version 1 cannot verify, and must be told so.
    """
    layout = SCHEMA_LAYOUTS.get(schema_version) if isinstance(schema_version, int) else None
    if layout is None or isinstance(schema_version, bool):
        raise SchemaVersionMismatch(
            f"schema_version {schema_version!r} is not implemented",
            {"supported": sorted(SCHEMA_LAYOUTS)},
        )
    return layout


def supported_versions() -> List[int]:
    return sorted(SCHEMA_LAYOUTS)
