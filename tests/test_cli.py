"""
tests/test_cli.py

settleid CLI — exit codes and output formats.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from settleid.cli import cli


VECTOR_FILE = Path(__file__).parent.parent / "cross_lang_proof" / "settlement_id_v1.json"

ADDRESS_A  = "GAMR2WQTUJWWJ6GUHMCANTNHNO6L6QU6OUD3RDVN7WVEHORXJHOSWNO5"
ADDRESS_B  = "GDZCH7VFVGJOOAVGMZMCCOCSOVG3YUJEFL3B2WXDXJJDWDEDNXYX62Y7"
PRIMARY_ID = "af189df37451575abace9d837900126d6a830f0f5692d42a7c9616ddb93a092e"

PRIMARY_ARGS = [
    "--remittance-id", "42",
    "--sender", ADDRESS_A,
    "--agent", ADDRESS_B,
    "--amount", "1000000000",
    "--fee", "30000000",
]


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("SETTLEID_MODE", raising=False)
    monkeypatch.delenv("SETTLEID_SCHEMA_VERSION", raising=False)
    return CliRunner()


class TestCompute:

    def test_hex(self, runner):
        result = runner.invoke(cli, ["compute", *PRIMARY_ARGS])
        assert result.exit_code == 0
        assert result.output.strip() == PRIMARY_ID

    def test_json(self, runner):
        result = runner.invoke(cli, ["compute", *PRIMARY_ARGS, "--format", "json"])
        assert result.exit_code == 0
        out = json.loads(result.output)["settleid_compute"]
        assert out["settlement_id_hex"] == PRIMARY_ID
        assert out["canonical_length"] == 116
        assert out["input"]["expiry"] is None

    def test_invalid_address_exit_2(self, runner):
        args = list(PRIMARY_ARGS)
        args[3] = ADDRESS_A.lower()
        result = runner.invoke(cli, ["compute", *args])
        assert result.exit_code == 2

    def test_strict_rejects_negative(self, runner):
        args = list(PRIMARY_ARGS)
        args[7] = "-5"
        assert runner.invoke(cli, ["compute", *args]).exit_code == 0
        assert runner.invoke(cli, ["compute", *args, "--strict"]).exit_code == 2

    def test_strict_from_env(self, runner, monkeypatch):
        monkeypatch.setenv("SETTLEID_MODE", "strict")
        result = runner.invoke(cli, ["compute", *PRIMARY_ARGS, "--expiry", "0"])
        assert result.exit_code == 2

    def test_oversized_decimal_exit_2(self, runner):
        args = list(PRIMARY_ARGS)
        args[1] = "9" * 5000
        result = runner.invoke(cli, ["compute", *args])
        assert result.exit_code == 2
        assert not isinstance(result.exception, ValueError)

    def test_unknown_schema_exit_2(self, runner):
        result = runner.invoke(cli, ["compute", *PRIMARY_ARGS, "--schema-version", "2"])
        assert result.exit_code == 2


class TestVerify:

    def test_match(self, runner):
        result = runner.invoke(cli, ["verify", PRIMARY_ID, *PRIMARY_ARGS, "--no-color"])
        assert result.exit_code == 0
        assert "MATCH" in result.output

    def test_mismatch(self, runner):
        result = runner.invoke(cli, ["verify", "00" * 32, *PRIMARY_ARGS, "--no-color"])
        assert result.exit_code == 1
        assert "MISMATCH" in result.output

    def test_quiet(self, runner):
        result = runner.invoke(cli, ["verify", PRIMARY_ID, *PRIMARY_ARGS, "--quiet"])
        assert result.exit_code == 0
        assert result.output == ""

    def test_malformed_expected_exit_2(self, runner):
        result = runner.invoke(cli, ["verify", "xyz", *PRIMARY_ARGS])
        assert result.exit_code == 2

    def test_unknown_schema_cannot_verify(self, runner):
        result = runner.invoke(cli, ["verify", PRIMARY_ID, *PRIMARY_ARGS, "--schema-version", "2"])
        assert result.exit_code == 2


class TestVectors:

    def test_committed_file_passes(self, runner):
        result = runner.invoke(cli, ["vectors", str(VECTOR_FILE), "--no-color"])
        assert result.exit_code == 0
        assert "CONFORMANT" in result.output

    def test_json(self, runner):
        result = runner.invoke(cli, ["vectors", str(VECTOR_FILE), "--format", "json"])
        assert result.exit_code == 0
        out = json.loads(result.output)["settleid_vectors"]
        assert out["conformant"] is True
        assert out["passed"] == 10

    def test_compact(self, runner):
        result = runner.invoke(cli, ["vectors", str(VECTOR_FILE), "--format", "compact", "--no-color"])
        assert result.exit_code == 0
        assert result.output.startswith("PASS")

    def test_tampered_file_exit_1(self, runner, tmp_path):
        doc = json.loads(VECTOR_FILE.read_text())
        doc["vectors"][0]["settlement_id_hex"] = "11" * 32
        path = tmp_path / "tampered.json"
        path.write_text(json.dumps(doc))
        result = runner.invoke(cli, ["vectors", str(path), "--quiet"])
        assert result.exit_code == 1

    def test_missing_file_exit_2(self, runner, tmp_path):
        result = runner.invoke(cli, ["vectors", str(tmp_path / "missing.json")])
        assert result.exit_code == 2

    def test_export(self, runner, tmp_path):
        out = tmp_path / "report.json"
        result = runner.invoke(cli, ["vectors", str(VECTOR_FILE), "--quiet", "--export", str(out)])
        assert result.exit_code == 0
        assert json.loads(out.read_text())["conformant"] is True


class TestLayout:

    def test_layout(self, runner):
        result = runner.invoke(cli, ["layout", "--schema-version", "1"])
        assert result.exit_code == 0
        assert "116 bytes" in result.output
        assert "expiry" in result.output

    def test_unknown_layout(self, runner):
        assert runner.invoke(cli, ["layout", "--schema-version", "5"]).exit_code == 2
