"""
settleid/cli/vectors.py

settleid vectors — Cross-implementation conformance check
=========================================================

Runs a committed vector file against this implementation.

Usage:
    settleid vectors cross_lang_proof/settlement_id_v1.json
    settleid vectors <file> --format json
    settleid vectors <file> --format compact
    settleid vectors <file> --export report.json
    settleid vectors <file> --quiet

Exit codes:
    0  Every vector passes
    1  At least one vector fails (including "cannot verify")
    2  Error  (file missing, malformed JSON, malformed vector file)
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from settleid.core.exceptions import SettleIdError
from settleid.verification.vectors import (
    ConformanceReport,
    VectorSuite,
    load_vector_suite,
    run_vector_suite,
)
from settleid.cli.output import _Color, emit_error, row_fail, row_info, row_ok


@click.command(name="vectors")
@click.argument("vector_file", type=click.Path(exists=False))
@click.option(
    "--format", "fmt",
    type=click.Choice(["human", "json", "compact"], case_sensitive=False),
    default="human",
    show_default=True,
    help="Output format: human (default), json (CI/automation), compact (pipelines).",
)
@click.option(
    "--export",
    "export_path",
    type=click.Path(),
    default=None,
    metavar="PATH",
    help="Export the full conformance report to a JSON file.",
)
@click.option("--quiet", is_flag=True, default=False,
              help="Suppress all output. Use exit code only (0=pass, 1=fail, 2=error).")
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI color output.")
def vectors_command(
    vector_file: str,
    fmt:         str,
    export_path: Optional[str],
    quiet:       bool,
    no_color:    bool,
) -> None:
    """
    Check this implementation against a Settlement ID vector file.

    VECTOR_FILE is the path to a settleid-vectors/1 JSON file.
    """
    _Color.configure(not no_color)

    try:
        suite = load_vector_suite(Path(vector_file))
    except FileNotFoundError as e:
        emit_error("settleid_vectors", str(e), fmt, quiet)
        sys.exit(2)
    except SettleIdError as e:
        emit_error("settleid_vectors", str(e), fmt, quiet)
        sys.exit(2)

    report = run_vector_suite(suite)

    if export_path:
        try:
            report.export_json(Path(export_path))
        except OSError as e:
            if not quiet and fmt == "human":
                click.echo(_Color.yellow(f"\n  ⚠️   Export failed: {e}"), err=True)

    if quiet:
        sys.exit(0 if report.conformant else 1)

    if fmt == "json":
        click.echo(json.dumps({"settleid_vectors": dict(
            report.to_dict(), vector_file=str(vector_file), export_path=export_path,
        )}, indent=2))
    elif fmt == "compact":
        _output_compact(report, Path(vector_file))
    else:
        _output_human(report, suite, Path(vector_file), export_path)

    sys.exit(0 if report.conformant else 1)


def _output_human(
    report:      ConformanceReport,
    suite:       VectorSuite,
    vector_file: Path,
    export_path: Optional[str],
) -> None:
    BAR_HEAVY = "═" * 68
    BAR_LIGHT = "─" * 68

    click.echo()
    click.echo(_Color.bold(f"  {BAR_HEAVY}"))
    click.echo(_Color.bold(  "  settleid  ·  Settlement ID Conformance"))
    click.echo(_Color.bold(f"  {BAR_HEAVY}"))
    click.echo()

    click.echo(row_info("Vector file", str(vector_file)))
    click.echo(row_info("Schema", f"v{suite.schema_version}  ·  {suite.hash_algorithm}"))
    click.echo(row_info("Addresses", f"{suite.address_format}  ({suite.address_width} bytes)"))
    click.echo(row_info("Suite", _Color.cyan(report.suite_fingerprint[:16] + "...")
                        + _Color.dim("  hex(SHA-256(JCS(file)))")))
    click.echo()

    for result in report.results:
        if result.passed:
            click.echo(row_ok(result.name, result.detail))
        else:
            click.echo(row_fail(result.name, _Color.red(result.detail)))
            if result.expected_id_hex:
                click.echo(row_info("", f"expected {result.expected_id_hex}"))
            if result.actual_id_hex:
                click.echo(row_info("", f"computed {result.actual_id_hex}"))

    if export_path:
        click.echo()
        click.echo(row_info("Exported", export_path))

    click.echo()
    click.echo(f"  {BAR_LIGHT}")
    total = len(report.results)
    if report.conformant:
        click.echo(_Color.green(_Color.bold(
            f"  ✅  CONFORMANT  ·  {report.passed}/{total} vectors pass"
        )))
    else:
        click.echo(_Color.red(_Color.bold(
            f"  ❌  NON-CONFORMANT  ·  {report.failed}/{total} vector(s) fail"
        )))
    click.echo(f"  {BAR_LIGHT}")
    click.echo()


def _output_compact(report: ConformanceReport, vector_file: Path) -> None:
    """
    Single-line output for shell pipelines and CI logs.

    Format:
        PASS  settlement_id_v1.json  8/8 vectors  suite=3f1a...
    """
    status = "PASS" if report.conformant else "FAIL"
    color  = _Color.green if report.conformant else _Color.red
    click.echo(
        color(f"{status:<6}")
        + f"{vector_file.name:<30}  {report.passed}/{len(report.results)} vectors  "
        + f"suite={report.suite_fingerprint[:16]}"
    )
