"""Tests for directory path encoding."""

import itertools
from pathlib import PurePosixPath

import pytest

from catsort.organization.path_encoder import (
    PathEncoder,
    encode_destination_name,
    encode_directory,
    encode_segments,
    split_segments,
)


class TestSplitSegments:
    """Test splitting directories into segments."""

    def test_relative_path(self):
        assert split_segments("archive/2024") == ["archive", "2024"]

    def test_absolute_path_drops_leading_separator(self):
        assert split_segments("/home/user/notes") == ["home", "user", "notes"]

    def test_trailing_separator(self):
        assert split_segments("archive/2024/") == ["archive", "2024"]

    @pytest.mark.parametrize("directory", ["", ".", "/"])
    def test_empty_directory(self, directory):
        assert split_segments(directory) == []

    def test_no_normalization(self):
        """Test that dot segments and doubled separators are kept."""
        assert split_segments("a/./b/../c") == ["a", ".", "b", "..", "c"]
        assert split_segments("a//b") == ["a", "", "b"]

    def test_accepts_pure_path(self):
        assert split_segments(PurePosixPath("archive/2024")) == ["archive", "2024"]


class TestEncodeDirectory:
    """Test encoding of directory paths."""

    def test_basic_encoding(self):
        """Test the archive example."""
        assert encode_directory("archive/2024") == "archive-2024"

    def test_single_segment(self):
        assert encode_directory("archive") == "archive"

    def test_root_yields_empty_prefix(self):
        assert encode_directory("") == ""

    def test_spaces_and_accents_pass_through(self):
        """Test that nothing but separators changes."""
        assert encode_directory("my docs/Café crème/é") == "my docs-Café crème-é"

    def test_join_char_not_escaped(self):
        """Test the accepted ambiguity: a dash in a segment is kept as-is."""
        assert encode_directory("a-b/c") == "a-b-c"
        assert encode_directory("a/b-c") == "a-b-c"

    def test_custom_join_char(self):
        assert encode_directory("archive/2024", join_char="_") == "archive_2024"

    def test_segments(self):
        assert encode_segments(["x", "y", "z"]) == "x-y-z"
        assert encode_segments([]) == ""

    def test_injective_without_join_char(self):
        """Test distinct paths give distinct encodings when segments lack '-'."""
        alphabet = ["a", "b", "ab", "a b", "é"]
        paths = set()
        for depth in range(1, 4):
            for segments in itertools.product(alphabet, repeat=depth):
                paths.add("/".join(segments))

        encoded = {encode_directory(path) for path in paths}
        assert len(encoded) == len(paths)


class TestDestinationName:
    """Test destination leaf names."""

    def test_with_prefix(self):
        assert encode_destination_name("archive-2024", "file17.txt") == (
            "archive-2024-file17.txt"
        )

    def test_empty_prefix_has_no_leading_join_char(self):
        assert encode_destination_name("", "file17.txt") == "file17.txt"


class TestPathEncoder:
    """Test the bound encoder."""

    def test_destination_name(self):
        encoder = PathEncoder()
        assert encoder.destination_name("archive/2024", "file17.txt") == (
            "archive-2024-file17.txt"
        )
        assert encoder.destination_name("", "file17.txt") == "file17.txt"

    @pytest.mark.parametrize("join_char", ["", "/"])
    def test_invalid_join_char(self, join_char):
        with pytest.raises(ValueError):
            PathEncoder(join_char)
