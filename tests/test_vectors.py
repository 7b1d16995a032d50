"""
tests/test_vectors.py

Cross-implementation conformance gate.

The committed vector file is shared with every other implementation.
This suite runs it through the Python pipeline and checks that the
harness itself cannot be fooled: tampered vectors fail, unknown schema
versions fail closed, and the suite fingerprint ignores on-disk formatting.
"""

import copy
import json
from pathlib import Path

import pytest

from settleid.core.exceptions import InvalidInput
from settleid.verification.vectors import (
    load_vector_suite,
    parse_vector_suite,
    run_vector_suite,
)


VECTOR_FILE = Path(__file__).parent.parent / "cross_lang_proof" / "settlement_id_v1.json"


@pytest.fixture
def document():
    return json.loads(VECTOR_FILE.read_text(encoding="utf-8"))


def _by_name(report):
    return {r.name: r for r in report.results}


class TestCommittedVectors:

    def test_every_vector_passes(self):
        report = run_vector_suite(load_vector_suite(VECTOR_FILE))
        failures = [(r.name, r.detail) for r in report.results if not r.passed]
        assert failures == []
        assert report.conformant
        assert report.passed == len(report.results) == 10

    def test_primary_vector_is_present_and_exact(self, document):
        primary = next(v for v in document["vectors"] if v["name"] == "primary")
        assert primary["input"] == {
            "remittance_id": "42",
            "sender": document["addresses"]["A"]["strkey"],
            "agent":  document["addresses"]["B"]["strkey"],
            "amount": "1000000000",
            "fee":    "30000000",
            "expiry": None,
        }
        assert primary["settlement_id_hex"] == (
            "af189df37451575abace9d837900126d6a830f0f5692d42a7c9616ddb93a092e"
        )

    def test_expiry_zero_vector_equals_primary(self, document):
        ids = {v["name"]: v.get("settlement_id_hex") for v in document["vectors"]}
        assert ids["primary"] == ids["primary_expiry_zero"]

    def test_buffers_are_fixed_length(self, document):
        for v in document["vectors"]:
            if "canonical_bytes_hex" in v:
                assert len(bytes.fromhex(v["canonical_bytes_hex"])) == 116, v["name"]

    def test_declared_layout_matches_registry(self, document):
        from settleid.core.canonical import field_offsets
        declared = [(f["name"], f["kind"], f["start"], f["end"]) for f in document["layout"]]
        actual   = [(o.name, o.kind, o.start, o.end) for o in field_offsets(1)]
        assert declared == actual

    def test_declared_addresses_derive_from_seeds(self, document):
        from settleid.core.address import AccountAddress
        for entry in document["addresses"].values():
            address = AccountAddress.from_seed(bytes.fromhex(entry["seed_hex"]))
            assert address.raw.hex() == entry["public_key_hex"]
            assert address.strkey == entry["strkey"]


class TestHarnessCannotBeFooled:

    def test_tampered_id_fails(self, document):
        doc = copy.deepcopy(document)
        doc["vectors"][0]["settlement_id_hex"] = "00" * 32
        report = run_vector_suite(parse_vector_suite(doc))
        result = _by_name(report)["primary"]
        assert not result.passed
        assert result.buffer_match is True
        assert not report.conformant

    def test_tampered_buffer_fails(self, document):
        doc = copy.deepcopy(document)
        hex_buf = doc["vectors"][0]["canonical_bytes_hex"]
        doc["vectors"][0]["canonical_bytes_hex"] = hex_buf[:-2] + "01"
        result = _by_name(run_vector_suite(parse_vector_suite(doc)))["primary"]
        assert not result.passed
        assert result.buffer_match is False

    def test_tampered_input_reports_layout_divergence(self, document):
        doc = copy.deepcopy(document)
        doc["vectors"][0]["input"]["fee"] = "30000001"
        result = _by_name(run_vector_suite(parse_vector_suite(doc)))["primary"]
        assert not result.passed
        assert "canonical buffer differs" in result.detail

    def test_error_vector_that_computes_fails(self, document):
        doc = copy.deepcopy(document)
        bad = next(v for v in doc["vectors"] if v["name"] == "amount_overflow")
        bad["input"]["amount"] = "1"
        result = _by_name(run_vector_suite(parse_vector_suite(doc)))["amount_overflow"]
        assert not result.passed
        assert "computed an ID instead" in result.detail

    def test_wrong_error_type_fails(self, document):
        doc = copy.deepcopy(document)
        bad = next(v for v in doc["vectors"] if v["name"] == "amount_overflow")
        bad["expected_error"] = "SchemaVersionMismatch"
        result = _by_name(run_vector_suite(parse_vector_suite(doc)))["amount_overflow"]
        assert not result.passed

    def test_unknown_schema_version_cannot_verify(self, document):
        doc = copy.deepcopy(document)
        doc["schema_version"] = 2
        report = run_vector_suite(parse_vector_suite(doc))
        assert report.passed == 0
        assert all("cannot verify" in r.detail for r in report.results)

    def test_unknown_hash_algorithm_cannot_verify(self, document):
        doc = copy.deepcopy(document)
        doc["hash_algorithm"] = "sha3_256"
        report = run_vector_suite(parse_vector_suite(doc))
        assert not report.conformant
        assert all("cannot verify" in r.detail for r in report.results)

    def test_empty_suite_is_not_conformant(self, document):
        doc = copy.deepcopy(document)
        doc["vectors"] = []
        assert not run_vector_suite(parse_vector_suite(doc)).conformant


class TestSuiteLoading:

    def test_fingerprint_ignores_formatting_and_key_order(self, document, tmp_path):
        compact = tmp_path / "compact.json"
        compact.write_text(json.dumps(document, separators=(",", ":"), sort_keys=True))
        assert load_vector_suite(compact).fingerprint() == load_vector_suite(VECTOR_FILE).fingerprint()

    def test_fingerprint_changes_with_content(self, document):
        doc = copy.deepcopy(document)
        doc["vectors"][0]["description"] = "changed"
        assert parse_vector_suite(doc).fingerprint() != parse_vector_suite(document).fingerprint()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_vector_suite(tmp_path / "nope.json")

    def test_not_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(InvalidInput):
            load_vector_suite(path)

    @pytest.mark.parametrize("mutate", [
        lambda d: d.update(format="other/1"),
        lambda d: d.pop("vectors"),
        lambda d: d.update(schema_version="1"),
        lambda d: d["vectors"][0].pop("settlement_id_hex"),
        lambda d: d["vectors"][0].pop("input"),
        lambda d: d["vectors"][5].update(expected_error="Boom"),
    ])
    def test_malformed_document(self, document, mutate):
        doc = copy.deepcopy(document)
        mutate(doc)
        with pytest.raises(InvalidInput):
            parse_vector_suite(doc)

    def test_export_report(self, tmp_path):
        report = run_vector_suite(load_vector_suite(VECTOR_FILE))
        out = tmp_path / "report.json"
        report.export_json(out)
        data = json.loads(out.read_text())
        assert data["conformant"] is True
        assert data["passed"] == 10
        assert data["suite_fingerprint"] == report.suite_fingerprint
