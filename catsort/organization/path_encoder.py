"""
Flatten a directory path into a single filename-safe token.

Every path separator becomes the join character and nothing else changes:
spaces, accents and undecodable bytes pass through. The join character is
not escaped when it already occurs inside a segment, so ``a-b/c`` and
``a/b-c`` encode identically; the relocator catches the resulting collision
as a destination conflict.
"""

import os
from pathlib import PurePath
from typing import List, Sequence, Union

DEFAULT_JOIN_CHAR = "-"

_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


def split_segments(directory: Union[str, PurePath]) -> List[str]:
    """
    Split a directory path into its segments.

    Leading and trailing separators are dropped. No other normalization is
    done: ``.``, ``..`` and empty segments from doubled separators are kept.
    """
    text = os.fspath(directory)
    if text in ("", "."):
        return []

    for sep in _SEPARATORS[1:]:
        text = text.replace(sep, _SEPARATORS[0])
    text = text.strip(_SEPARATORS[0])
    if not text:
        return []
    return text.split(_SEPARATORS[0])


def encode_segments(segments: Sequence[str], join_char: str = DEFAULT_JOIN_CHAR) -> str:
    """Join path segments with the join character."""
    return join_char.join(segments)


def encode_directory(
    directory: Union[str, PurePath], join_char: str = DEFAULT_JOIN_CHAR
) -> str:
    """
    Encode a directory path as a flat prefix.

    Args:
        directory: Directory component of the original file path
        join_char: Character that replaces each separator

    Returns:
        Encoded prefix; empty for the current directory
    """
    return encode_segments(split_segments(directory), join_char)


def encode_destination_name(
    prefix: str, leaf_name: str, join_char: str = DEFAULT_JOIN_CHAR
) -> str:
    """
    Build the destination leaf name from an encoded prefix and the original name.

    An empty prefix yields the leaf name unchanged, never a leading join char.
    """
    if not prefix:
        return leaf_name
    return f"{prefix}{join_char}{leaf_name}"


class PathEncoder:
    """Directory encoder bound to one join character."""

    def __init__(self, join_char: str = DEFAULT_JOIN_CHAR):
        if not join_char or any(sep in join_char for sep in _SEPARATORS):
            raise ValueError(f"Invalid join character: {join_char!r}")
        self.join_char = join_char

    def encode(self, directory: Union[str, PurePath]) -> str:
        return encode_directory(directory, self.join_char)

    def destination_name(self, directory: Union[str, PurePath], leaf_name: str) -> str:
        return encode_destination_name(self.encode(directory), leaf_name, self.join_char)
