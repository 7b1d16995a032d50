"""
settleid/verification/vectors.py

Cross-implementation conformance vectors.

Every implementation of the Settlement ID pipeline, in any language, must
pass the same committed vector file. Passing its own unit tests is not
enough: the vector file is the conformance gate.

Vector file format (JSON):

    {
      "format":         "settleid-vectors/1",
      "schema_version": 1,
      "hash_algorithm": "sha256",
      "address_format": "stellar-strkey-ed25519",
      "address_width":  32,
      "vectors": [
        {
          "name":                "primary",
          "description":         "...",
          "input":               { decimal-string integers, strkey addresses },
          "canonical_bytes_hex": "...",     # optional
          "settlement_id_hex":   "..."      # or "expected_error": "EncodingError"
        }
      ]
    }

Suite identity:
    fingerprint = hex(SHA-256(JCS(document)))
Two parties holding files with equal fingerprints hold the same vector set,
regardless of whitespace or key order on disk.
"""

import hashlib
import json
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import jcs

from settleid.core.canonical import canonical_encode
from settleid.core.config import standard_config
from settleid.core.exceptions import (
    EncodingError,
    InvalidInput,
    SchemaVersionMismatch,
    SettleIdError,
)
from settleid.core.models import RemittanceFingerprintInput
from settleid.core.schema import SCHEMA_LAYOUTS, supported_versions
from settleid.verification.service import SettlementIdService


VECTOR_FORMAT = "settleid-vectors/1"

# Error names a vector may expect. Shared vocabulary across implementations.
_ERROR_TYPES = {
    "InvalidInput":          InvalidInput,
    "EncodingError":         EncodingError,
    "SchemaVersionMismatch": SchemaVersionMismatch,
}


# ─────────────────────────────────────────────────────────────
# Suite Types
# ─────────────────────────────────────────────────────────────

@dataclass
class TestVector:
    name:                str
    description:         str
    input:               Dict[str, Any]
    settlement_id_hex:   Optional[str] = None
    canonical_bytes_hex: Optional[str] = None
    expected_error:      Optional[str] = None

    __test__ = False  # not a pytest class


@dataclass
class VectorSuite:
    format:         str
    schema_version: int
    hash_algorithm: str
    address_format: str
    address_width:  int
    vectors:        List[TestVector]
    document:       Dict[str, Any] = field(repr=False, default_factory=dict)

    def fingerprint(self) -> str:
        return hashlib.sha256(jcs.canonicalize(self.document)).hexdigest()


@dataclass
class VectorResult:
    name:            str
    passed:          bool
    detail:          str
    expected_id_hex: Optional[str] = None
    actual_id_hex:   Optional[str] = None
    buffer_match:    Optional[bool] = None


@dataclass
class ConformanceReport:
    suite_fingerprint: str
    schema_version:    int
    results:           List[VectorResult]

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return len(self.results) - self.passed

    @property
    def conformant(self) -> bool:
        return bool(self.results) and self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suite_fingerprint": self.suite_fingerprint,
            "schema_version":    self.schema_version,
            "conformant":        self.conformant,
            "passed":            self.passed,
            "failed":            self.failed,
            "results":           [asdict(r) for r in self.results],
        }

    def export_json(self, output_path: Path) -> None:
        output_path = Path(output_path)
        output_path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")


# ─────────────────────────────────────────────────────────────
# Loading
# ─────────────────────────────────────────────────────────────

def load_vector_suite(path: Path) -> VectorSuite:
    """
    Load and structurally validate a vector file.

    Raises:
        FileNotFoundError — path does not exist
        InvalidInput      — not JSON, or required keys missing / mistyped
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vector file not found: {path}")
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidInput(f"vector file is not valid JSON: {exc}", {"path": str(path)}) from exc
    return parse_vector_suite(document)


def parse_vector_suite(document: Dict[str, Any]) -> VectorSuite:
    if not isinstance(document, dict):
        raise InvalidInput("vector document must be a JSON object")

    if document.get("format") != VECTOR_FORMAT:
        raise InvalidInput(
            "unknown vector file format",
            {"expected": VECTOR_FORMAT, "got": document.get("format")},
        )
    for key, kind in (
        ("schema_version", int),
        ("hash_algorithm", str),
        ("address_format", str),
        ("address_width",  int),
        ("vectors",        list),
    ):
        if not isinstance(document.get(key), kind) or isinstance(document.get(key), bool):
            raise InvalidInput(f"vector file key '{key}' must be {kind.__name__}")

    vectors: List[TestVector] = []
    for i, raw in enumerate(document["vectors"]):
        if not isinstance(raw, dict):
            raise InvalidInput(f"vector #{i} must be an object")
        name = raw.get("name") or f"vector-{i}"
        if not isinstance(raw.get("input"), dict):
            raise InvalidInput(f"vector '{name}' has no input object")
        if raw.get("settlement_id_hex") is None and raw.get("expected_error") is None:
            raise InvalidInput(
                f"vector '{name}' needs settlement_id_hex or expected_error"
            )
        if raw.get("expected_error") is not None and raw["expected_error"] not in _ERROR_TYPES:
            raise InvalidInput(
                f"vector '{name}' expects unknown error type",
                {"got": raw["expected_error"], "valid": sorted(_ERROR_TYPES)},
            )
        vectors.append(TestVector(
            name=                name,
            description=         raw.get("description", ""),
            input=               raw["input"],
            settlement_id_hex=   raw.get("settlement_id_hex"),
            canonical_bytes_hex= raw.get("canonical_bytes_hex"),
            expected_error=      raw.get("expected_error"),
        ))

    return VectorSuite(
        format=         document["format"],
        schema_version= document["schema_version"],
        hash_algorithm= document["hash_algorithm"],
        address_format= document["address_format"],
        address_width=  document["address_width"],
        vectors=        vectors,
        document=       document,
    )


# ─────────────────────────────────────────────────────────────
# Running
# ─────────────────────────────────────────────────────────────

def run_vector_suite(suite: VectorSuite) -> ConformanceReport:
    """
    Check every vector against this implementation.

    A suite declaring a schema version or hash algorithm this build does not
    implement fails every vector with "cannot verify". It never passes by
    falling back to another layout.
    """
    # Conformance runs must not be noisy about the expiry=0 vector.
    service = SettlementIdService(replace(standard_config(), warn_on_zero_expiry=False))
    fingerprint = suite.fingerprint()

    layout = SCHEMA_LAYOUTS.get(suite.schema_version)
    if layout is None or layout.hash_algorithm != suite.hash_algorithm:
        detail = (
            f"cannot verify: schema_version={suite.schema_version} "
            f"hash_algorithm={suite.hash_algorithm} not implemented "
            f"(supported versions: {supported_versions()})"
        )
        return ConformanceReport(
            suite_fingerprint=fingerprint,
            schema_version=suite.schema_version,
            results=[
                VectorResult(name=v.name, passed=False, detail=detail,
                             expected_id_hex=v.settlement_id_hex)
                for v in suite.vectors
            ],
        )

    results = [_run_vector(service, suite.schema_version, v) for v in suite.vectors]
    return ConformanceReport(
        suite_fingerprint=fingerprint,
        schema_version=suite.schema_version,
        results=results,
    )


def _run_vector(
    service:        SettlementIdService,
    schema_version: int,
    vector:         TestVector,
) -> VectorResult:
    data = dict(vector.input)
    data.setdefault("schema_version", schema_version)

    try:
        fingerprint_input = RemittanceFingerprintInput.from_dict(data)
        buffer            = canonical_encode(fingerprint_input)
        settlement_id     = service.compute(fingerprint_input)
    except SettleIdError as exc:
        if vector.expected_error is not None:
            ok = isinstance(exc, _ERROR_TYPES[vector.expected_error])
            return VectorResult(
                name=vector.name,
                passed=ok,
                detail=(
                    f"raised {type(exc).__name__} as expected" if ok
                    else f"expected {vector.expected_error}, raised {type(exc).__name__}: {exc}"
                ),
            )
        return VectorResult(
            name=vector.name,
            passed=False,
            detail=f"{type(exc).__name__}: {exc}",
            expected_id_hex=vector.settlement_id_hex,
        )

    if vector.expected_error is not None:
        return VectorResult(
            name=vector.name,
            passed=False,
            detail=f"expected {vector.expected_error}, computed an ID instead",
            actual_id_hex=settlement_id.hex(),
        )

    buffer_match = None
    if vector.canonical_bytes_hex is not None:
        buffer_match = buffer.hex() == vector.canonical_bytes_hex.lower()

    expected_hex = vector.settlement_id_hex.lower()
    id_match     = settlement_id.hex() == expected_hex

    if id_match and buffer_match is not False:
        detail = "match"
    elif not id_match and buffer_match is False:
        detail = "canonical buffer differs: field layout or encoding diverges"
    elif not id_match:
        detail = "settlement id differs"
    else:
        detail = "settlement id matches but canonical_bytes_hex differs"

    return VectorResult(
        name=            vector.name,
        passed=          id_match and buffer_match is not False,
        detail=          detail,
        expected_id_hex= expected_hex,
        actual_id_hex=   settlement_id.hex(),
        buffer_match=    buffer_match,
    )
