"""
Pytest configuration and fixtures for catsort tests.

Relocation encodes the directory a file was discovered in, so most tests
run inside a temporary working directory and pass relative roots.
"""

import os
from pathlib import Path
from typing import Callable, Union

import pytest

from catsort.organization import RelocationStrategy, Relocator


@pytest.fixture
def workspace(tmp_path, monkeypatch) -> Path:
    """Temporary directory that is also the current working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_file(workspace) -> Callable[..., Path]:
    """Create a file (and its parents) relative to the workspace."""

    def _make(relative: Union[str, bytes], content: Union[str, bytes] = "") -> Path:
        path = Path(os.fsdecode(relative))
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def relocator(workspace) -> Relocator:
    """Relocator writing category containers into the workspace."""
    return Relocator(strategy=RelocationStrategy(output_directory=Path(".")))
