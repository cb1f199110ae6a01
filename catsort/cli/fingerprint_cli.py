"""
CLI command for fingerprinting a directory tree.
"""

import sys
from typing import Optional

import click
from rich.console import Console

from ..organization.fingerprint import TreeFingerprint
from .relocate import display_path, display_text

console = Console()


@click.command()
@click.argument("directory", type=click.Path(exists=True, file_okay=False))
@click.option("--expect", default=None, help="Exit 1 unless the digest equals this value")
@click.option(
    "--list",
    "show_list",
    is_flag=True,
    default=False,
    help="Print the sorted path list that is hashed",
)
def fingerprint(directory: str, expect: Optional[str], show_list: bool) -> None:
    """
    Print the SHA-256 fingerprint of the files under DIRECTORY.

    Equivalent to: cd DIRECTORY && find . -type f | LC_ALL=C sort | sha256sum
    """
    tree = TreeFingerprint(directory)

    try:
        if show_list:
            for path in tree.paths():
                console.print(display_path(path), highlight=False)
        digest = tree.digest()
    except OSError as e:
        console.print(
            f"[red]✗ Cannot fingerprint {display_path(directory)}: "
            f"{display_text(str(e))}[/red]"
        )
        sys.exit(2)

    click.echo(digest)

    if expect is not None:
        if digest != expect.strip().lower():
            console.print(f"[red]✗ Fingerprint mismatch (expected {expect})[/red]")
            sys.exit(1)
        console.print("[green]✓ Fingerprint matches[/green]")
