"""
cross_lang_proof/emit_vectors.py

Settlement ID Cross-Language Vectors — Python Emitter
=====================================================

Regenerates settlement_id_v1.json from deterministic Ed25519 seeds.

The file contains EVERY intermediate value an independent implementation
needs to localize a divergence:
    - layout               (field name, kind, [start, end) per field)
    - addresses            (seed, raw public key hex, strkey)
    - input                (decimal-string integers, strkey addresses)
    - canonical_bytes_hex  (the 116-byte buffer before hashing)
    - settlement_id_hex    (SHA-256 of the buffer)
    - expected_error       (for vectors every implementation must reject)

Another implementation reads the file and independently recomputes:
    1. canonical_bytes from input using its own codec
    2. settlement_id from canonical_bytes using its own SHA-256
    3. rejects every expected_error vector

If all match, the layout is a cross-language protocol.

Usage:
    cd cross_lang_proof
    python emit_vectors.py
"""

import json
from dataclasses import replace
from pathlib import Path

from settleid.core.address import AccountAddress
from settleid.core.canonical import canonical_encode, field_offsets
from settleid.core.config import standard_config
from settleid.core.models import RemittanceFingerprintInput
from settleid.core.schema import CURRENT_SCHEMA_VERSION, get_layout
from settleid.verification.service import SettlementIdService


# ── Deterministic key seeds ───────────────────────────────────────────────────
# FIXED 32-byte seeds → deterministic accounts → reproducible vectors.
# These are NOT security keys.
SEED_A = bytes.fromhex(
    "deadbeefdeadbeefdeadbeefdeadbeef"
    "cafebabecafebabecafebabecafebabe"
)
SEED_B = bytes.fromhex(
    "cafebabecafebabecafebabecafebabe"
    "deadbeefdeadbeefdeadbeefdeadbeef"
)

I128_MAX = (1 << 127) - 1
I128_MIN = -(1 << 127)
U64_MAX  = (1 << 64) - 1


def _digest_vectors(a: AccountAddress, b: AccountAddress):
    return [
        ("primary",
         "Primary acceptance vector: remittance 42, A pays B, no expiry.",
         dict(remittance_id=42, sender=a, agent=b, amount=1_000_000_000, fee=30_000_000, expiry=None)),
        ("primary_expiry_zero",
         "Same as primary with expiry explicitly 0. Must equal primary.",
         dict(remittance_id=42, sender=a, agent=b, amount=1_000_000_000, fee=30_000_000, expiry=0)),
        ("with_expiry",
         "Concrete expiry 2025-01-01T00:00:00Z.",
         dict(remittance_id=7, sender=a, agent=b, amount=100_000, fee=1_000, expiry=1_735_689_600)),
        ("extremes",
         "u64 max ids, i128 max amount, i128 min fee, parties swapped.",
         dict(remittance_id=U64_MAX, sender=b, agent=a, amount=I128_MAX, fee=I128_MIN, expiry=U64_MAX)),
        ("negative_amount_same_party",
         "amount -1 (two's complement), sender equals agent. The codec applies no business rules.",
         dict(remittance_id=1, sender=a, agent=a, amount=-1, fee=0, expiry=None)),
    ]


def _error_vectors(a: AccountAddress, b: AccountAddress):
    a_key, b_key = a.strkey, b.strkey
    # Same 32 bytes as A under the contract version byte (2 << 3).
    contract_a = "CAMR2WQTUJWWJ6GUHMCANTNHNO6L6QU6OUD3RDVN7WVEHORXJHOSXJLE"
    bad_checksum_a = a_key[:-1] + ("4" if a_key[-1] != "4" else "5")
    return [
        ("amount_overflow", "amount = 2^127 does not fit i128.",
         dict(remittance_id="42", sender=a_key, agent=b_key,
              amount=str(I128_MAX + 1), fee="0", expiry=None)),
        ("negative_remittance_id", "remittance_id is unsigned.",
         dict(remittance_id="-1", sender=a_key, agent=b_key, amount="1", fee="0", expiry=None)),
        ("lowercase_strkey", "Lowercase strkey is not canonical.",
         dict(remittance_id="42", sender=a_key.lower(), agent=b_key,
              amount="1000000000", fee="30000000", expiry=None)),
        ("bad_checksum", "Last strkey character altered; CRC16 no longer matches.",
         dict(remittance_id="42", sender=bad_checksum_a, agent=b_key,
              amount="1000000000", fee="30000000", expiry=None)),
        ("contract_address",
         "Contract strkey (C...) for the same 32 bytes as A is not an account address.",
         dict(remittance_id="42", sender=contract_a, agent=b_key,
              amount="1000000000", fee="30000000", expiry=None)),
    ]


def main():
    out_path = Path(__file__).parent / "settlement_id_v1.json"

    a = AccountAddress.from_seed(SEED_A)
    b = AccountAddress.from_seed(SEED_B)
    print(f"Address A : {a.strkey}")
    print(f"Address B : {b.strkey}")

    layout  = get_layout(CURRENT_SCHEMA_VERSION)
    service = SettlementIdService(replace(standard_config(), warn_on_zero_expiry=False))

    vectors = []
    for name, description, fields in _digest_vectors(a, b):
        fingerprint_input = RemittanceFingerprintInput(**fields)
        buffer            = canonical_encode(fingerprint_input)
        settlement_id     = service.compute(fingerprint_input)
        vectors.append({
            "name":                name,
            "description":         description,
            "input":               _input_json(fingerprint_input),
            "canonical_bytes_hex": buffer.hex(),
            "settlement_id_hex":   settlement_id.hex(),
        })
        print(f"  {name:<28} {settlement_id.hex()}")

    for name, description, fields in _error_vectors(a, b):
        vectors.append({
            "name":           name,
            "description":    description,
            "input":          fields,
            "expected_error": "EncodingError",
        })

    document = {
        "_description": (
            "Settlement ID conformance vectors, schema v1. Every implementation "
            "must reproduce canonical_bytes_hex and settlement_id_hex for each "
            "vector, and reject each expected_error vector. Integers are decimal strings."
        ),
        "format":         "settleid-vectors/1",
        "schema_version": layout.version,
        "hash_algorithm": layout.hash_algorithm,
        "address_format": "stellar-strkey-ed25519",
        "address_width":  32,
        "layout": [
            {"name": o.name, "kind": o.kind, "start": o.start, "end": o.end}
            for o in field_offsets(layout.version)
        ],
        "addresses": {
            "A": {"seed_hex": SEED_A.hex(), "public_key_hex": a.raw.hex(), "strkey": a.strkey},
            "B": {"seed_hex": SEED_B.hex(), "public_key_hex": b.raw.hex(), "strkey": b.strkey},
        },
        "vectors": vectors,
    }

    out_path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
    print()
    print(f"Vectors written to: {out_path}")
    print("Now run: settleid vectors settlement_id_v1.json")


def _input_json(fingerprint_input: RemittanceFingerprintInput) -> dict:
    # The file carries schema_version once at the top level.
    data = fingerprint_input.to_dict()
    del data["schema_version"]
    return data


if __name__ == "__main__":
    main()
