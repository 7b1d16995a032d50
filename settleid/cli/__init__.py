"""
settleid/cli/__init__.py

settleid CLI — root Click command group.

Registered in pyproject.toml as:

    [project.scripts]
    settleid = "settleid.cli:cli"

Adding a new command:
    1. Create settleid/cli/your_command.py with a @click.command()
    2. Import it here
    3. cli.add_command(your_command)
"""

import click

from settleid.cli.compute import compute_command, layout_command, verify_command
from settleid.cli.vectors import vectors_command


@click.group()
@click.version_option(package_name="settleid")
def cli() -> None:
    """
    settleid — Deterministic Settlement IDs.

    \b
    Commands:
      compute   Compute the Settlement ID for a remittance tuple.
      verify    Recompute and compare against an expected ID.
      vectors   Run a cross-implementation vector file.
      layout    Print the byte layout of a schema version.

    \b
    Quick start:
      settleid layout
      settleid vectors cross_lang_proof/settlement_id_v1.json
      settleid compute --remittance-id 42 --sender G... --agent G... \\
                       --amount 1000000000 --fee 30000000
    """
    pass


cli.add_command(compute_command)
cli.add_command(verify_command)
cli.add_command(vectors_command)
cli.add_command(layout_command)
