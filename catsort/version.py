"""Version information for catsort."""

import subprocess
from importlib import metadata
from pathlib import Path
from typing import Optional

try:
    __version__ = metadata.version("catsort")
except metadata.PackageNotFoundError:
    # Running from a source checkout that was never installed
    __version__ = "1.0.0"


def get_git_hash(repo_dir: Optional[Path] = None) -> Optional[str]:
    """Short commit hash of the checkout catsort runs from.

    Returns:
        7-character hash, or None outside a git checkout or without git.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short=7", "HEAD"],
            cwd=repo_dir or Path(__file__).resolve().parent.parent,
            capture_output=True,
            text=True,
            check=True,
            timeout=2,
        )
    except (
        subprocess.CalledProcessError,
        subprocess.TimeoutExpired,
        FileNotFoundError,
    ):
        return None
    return result.stdout.strip() or None


def get_version_string() -> str:
    """Version for ``--version``: "1.0.0", or "1.0.0 (git:abc1234)" in a checkout."""
    git_hash = get_git_hash()
    if git_hash:
        return f"{__version__} (git:{git_hash})"
    return __version__
