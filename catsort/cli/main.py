"""
Main CLI entry point for catsort.
"""

import click

from ..version import get_version_string
from .fingerprint_cli import fingerprint
from .relocate import relocate, rollback


@click.group()
@click.version_option(get_version_string(), prog_name="catsort")
def cli() -> None:
    """Sort categorized text files into a flat layout and fingerprint the result."""


cli.add_command(relocate)
cli.add_command(fingerprint)
cli.add_command(rollback)


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
