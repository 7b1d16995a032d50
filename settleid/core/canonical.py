"""
settleid: Canonical Encoder

This is the ONLY place fingerprint fields are assembled into bytes.
All Settlement ID computation and verification MUST go through
canonical_encode().

Field order, widths and the version tag come from the frozen layout in
settleid/core/schema.py. Nothing here depends on dict ordering, field
presence, or construction time: the layout tuple is the order.
"""

from typing import List

from settleid.core.codec import encode_field
from settleid.core.exceptions import EncodingError
from settleid.core.models import RemittanceFingerprintInput
from settleid.core.schema import FieldOffset, SchemaLayout, get_layout


def canonical_encode(fingerprint_input: RemittanceFingerprintInput) -> bytes:
    """
    Encode a fingerprint input to its canonical byte buffer.

    The layout is chosen by fingerprint_input.schema_version.

    Raises:
        SchemaVersionMismatch — schema_version is not registered
        EncodingError         — a field cannot be encoded in its width

    Returns:
        Exactly layout.total_length bytes (116 for schema 1).
    """
    layout = get_layout(fingerprint_input.schema_version)
    return encode_with_layout(layout, fingerprint_input)


def encode_with_layout(
    layout: SchemaLayout,
    fingerprint_input: RemittanceFingerprintInput,
) -> bytes:
    values = fingerprint_input.field_values()
    # The version tag is the layout's own, not whatever the caller put there.
    values["schema_version"] = layout.version

    parts: List[bytes] = []
    for spec in layout.fields:
        try:
            parts.append(encode_field(spec.kind, values[spec.name]))
        except EncodingError as exc:
            raise EncodingError(
                f"{spec.name}: {exc.message}",
                dict(exc.details, field=spec.name),
            ) from exc

    buffer = b"".join(parts)
    if len(buffer) != layout.total_length:
        raise EncodingError(
            "canonical buffer has wrong length",
            {"expected": layout.total_length, "got": len(buffer)},
        )
    return buffer


def field_offsets(schema_version: int) -> List[FieldOffset]:
    """[start, end) byte range of every field for a registered schema version."""
    return get_layout(schema_version).offsets()
