"""
settleid/cli/compute.py

settleid compute / verify / layout
==================================

Usage:
    settleid compute --remittance-id 42 --sender G... --agent G... \\
                     --amount 1000000000 --fee 30000000
    settleid compute ... --expiry 1735689600 --format json
    settleid verify <64-hex-id> --remittance-id 42 --sender G... ...
    settleid layout

Exit codes:
    0  computed / ID matches
    1  ID does not match (verify only)
    2  Error  (invalid input, unknown schema version)
"""

import json
import sys
from typing import Optional

import click

from settleid.core.canonical import canonical_encode, field_offsets
from settleid.core.config import config_from_env, strict_config
from settleid.core.exceptions import SchemaVersionMismatch, SettleIdError
from settleid.core.models import RemittanceFingerprintInput
from settleid.core.schema import CURRENT_SCHEMA_VERSION, get_layout
from settleid.verification.service import SettlementIdService
from settleid.cli.output import _Color, emit_error, row_fail, row_info, row_ok


def _fingerprint_options(fn):
    """The seven fingerprint fields, shared by compute and verify."""
    options = [
        click.option("--remittance-id", type=str, required=True, help="u64 remittance id."),
        click.option("--sender", type=str, required=True, help="Sender account strkey (G...)."),
        click.option("--agent", type=str, required=True, help="Agent account strkey (G...)."),
        click.option("--amount", type=str, required=True, help="i128 amount, smallest unit."),
        click.option("--fee", type=str, required=True, help="i128 fee, smallest unit."),
        click.option("--expiry", type=str, default=None, help="u64 expiry timestamp. Omit for none."),
        click.option(
            "--schema-version", type=int, default=None,
            help=f"Layout version. Default: SETTLEID_SCHEMA_VERSION or {CURRENT_SCHEMA_VERSION}.",
        ),
        click.option("--strict", is_flag=True, default=False,
                     help="Reject negative amount/fee and expiry=0."),
    ]
    for option in reversed(options):
        fn = option(fn)
    return fn


def _build(
    remittance_id:  str,
    sender:         str,
    agent:          str,
    amount:         str,
    fee:            str,
    expiry:         Optional[str],
    schema_version: Optional[int],
    strict:         bool,
):
    config = config_from_env()
    if strict:
        config = strict_config(config.schema_version)
    if schema_version is None:
        schema_version = config.schema_version

    fingerprint_input = RemittanceFingerprintInput.from_dict({
        "schema_version": schema_version,
        "remittance_id":  remittance_id,
        "sender":         sender,
        "agent":          agent,
        "amount":         amount,
        "fee":            fee,
        "expiry":         expiry,
    })
    return SettlementIdService(config), fingerprint_input


# ── compute ───────────────────────────────────────────────────────────────────

@click.command(name="compute")
@_fingerprint_options
@click.option(
    "--format", "fmt",
    type=click.Choice(["hex", "json"], case_sensitive=False),
    default="hex",
    show_default=True,
    help="hex: the ID only. json: ID, input and canonical buffer.",
)
def compute_command(
    remittance_id:  str,
    sender:         str,
    agent:          str,
    amount:         str,
    fee:            str,
    expiry:         Optional[str],
    schema_version: Optional[int],
    strict:         bool,
    fmt:            str,
) -> None:
    """
    Compute the Settlement ID for one remittance tuple.

    \b
    Examples:
      settleid compute --remittance-id 42 --sender G... --agent G... \\
                       --amount 1000000000 --fee 30000000
      settleid compute ... --format json
    """
    try:
        service, fingerprint_input = _build(
            remittance_id, sender, agent, amount, fee, expiry, schema_version, strict,
        )
        settlement_id = service.compute(fingerprint_input)
        buffer        = canonical_encode(fingerprint_input)
    except SettleIdError as e:
        emit_error("settleid_compute", str(e), fmt)
        sys.exit(2)

    if fmt == "json":
        click.echo(json.dumps({
            "settleid_compute": {
                "settlement_id_hex":   settlement_id.hex(),
                "schema_version":      fingerprint_input.schema_version,
                "input":               fingerprint_input.to_dict(),
                "canonical_bytes_hex": buffer.hex(),
                "canonical_length":    len(buffer),
            }
        }, indent=2))
    else:
        click.echo(settlement_id.hex())


# ── verify ────────────────────────────────────────────────────────────────────

@click.command(name="verify")
@click.argument("expected", type=str)
@_fingerprint_options
@click.option("--quiet", is_flag=True, default=False,
              help="Suppress all output. Use exit code only (0=match, 1=mismatch, 2=error).")
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI color output.")
def verify_command(
    expected:       str,
    remittance_id:  str,
    sender:         str,
    agent:          str,
    amount:         str,
    fee:            str,
    expiry:         Optional[str],
    schema_version: Optional[int],
    strict:         bool,
    quiet:          bool,
    no_color:       bool,
) -> None:
    """
    Recompute a Settlement ID and compare it with EXPECTED (64 hex chars).

    \b
    Examples:
      settleid verify af189df3... --remittance-id 42 --sender G... --agent G... \\
                      --amount 1000000000 --fee 30000000
      settleid verify <id> ... --quiet && echo "match"
    """
    _Color.configure(not no_color)
    try:
        service, fingerprint_input = _build(
            remittance_id, sender, agent, amount, fee, expiry, schema_version, strict,
        )
        matched  = service.verify(fingerprint_input, expected, fingerprint_input.schema_version)
        computed = service.compute(fingerprint_input)
    except SchemaVersionMismatch as e:
        emit_error("settleid_verify", f"cannot verify: {e}", "human", quiet)
        sys.exit(2)
    except SettleIdError as e:
        emit_error("settleid_verify", str(e), "human", quiet)
        sys.exit(2)

    if not quiet:
        click.echo()
        click.echo(row_info("Remittance", str(fingerprint_input.remittance_id)))
        click.echo(row_info("Schema", f"v{fingerprint_input.schema_version}"))
        click.echo(row_info("Expected", expected.lower()))
        click.echo(row_info("Computed", computed.hex()))
        if matched:
            click.echo(row_ok("Settlement ID", _Color.green("MATCH")))
        else:
            click.echo(row_fail("Settlement ID", _Color.red("MISMATCH")))
        click.echo()

    sys.exit(0 if matched else 1)


# ── layout ────────────────────────────────────────────────────────────────────

@click.command(name="layout")
@click.option("--schema-version", type=int, default=CURRENT_SCHEMA_VERSION, show_default=True)
def layout_command(schema_version: int) -> None:
    """Print the frozen byte layout for a schema version."""
    try:
        layout = get_layout(schema_version)
    except SchemaVersionMismatch as e:
        emit_error("settleid_layout", str(e), "human")
        sys.exit(2)

    click.echo()
    click.echo(_Color.bold(f"  schema_version {layout.version}  ·  {layout.hash_algorithm}  "
                           f"·  {layout.total_length} bytes"))
    click.echo()
    for off in field_offsets(schema_version):
        click.echo(f"  [{off.start:>3}..{off.end:<3})  {off.name:<16} {_Color.dim(off.kind)}")
    click.echo()
