"""
Relocation strategy.

Decides where a categorized file goes: one container directory per
category under the output directory, holding files named after their
encoded original location.
"""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.errors import InvalidCategoryForFilesystem
from ..core.types import SourceFile
from .path_encoder import DEFAULT_JOIN_CHAR, PathEncoder

# Longest single path component most filesystems accept, in bytes
MAX_COMPONENT_BYTES = 255


class RelocationStrategy(BaseModel):
    """Strategy for placing categorized files."""

    output_directory: Path = Field(
        default=Path("."),
        description="Directory under which category containers are created",
    )

    join_char: str = Field(
        default=DEFAULT_JOIN_CHAR,
        description="Character that replaces path separators in encoded names",
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("join_char")
    @classmethod
    def _check_join_char(cls, value: str) -> str:
        PathEncoder(value)
        return value

    @property
    def encoder(self) -> PathEncoder:
        return PathEncoder(self.join_char)

    def validate_category(self, source: SourceFile, category: str) -> None:
        """
        Check that a category can be used as a single directory name.

        Args:
            source: File the category was read from (for error reporting)
            category: Extracted category

        Raises:
            InvalidCategoryForFilesystem: If the category is not a valid component
        """
        if not category:
            reason = "category is empty"
        elif category in (".", ".."):
            reason = f"category {category!r} is a reserved name"
        elif "\x00" in category:
            reason = "category contains a NUL byte"
        elif os.sep in category or (os.altsep and os.altsep in category):
            reason = f"category {category!r} contains a path separator"
        elif len(os.fsencode(category)) > MAX_COMPONENT_BYTES:
            reason = f"category is longer than {MAX_COMPONENT_BYTES} bytes"
        else:
            return

        raise InvalidCategoryForFilesystem(source.path, reason)

    def get_target_directory(self, category: str) -> Path:
        """Container directory for a category."""
        return self.output_directory / category

    def get_target_filename(self, source: SourceFile) -> str:
        """
        Destination leaf name: encoded original directory joined to the leaf.

        A file found in the current directory keeps its name unchanged.
        """
        return self.encoder.destination_name(source.directory, source.name)

    def get_target_path(self, source: SourceFile, category: str) -> Path:
        """
        Get the complete destination path for a source file.

        Args:
            source: Discovered source file
            category: Its (validated) category

        Returns:
            ``output_directory/category/encodedPrefix-leafName``
        """
        return self.get_target_directory(category) / self.get_target_filename(source)

    def is_already_placed(self, source: SourceFile, category: str) -> bool:
        """
        True when the file already sits directly in its category container.

        Re-running over an organized tree must not move those files again.
        """
        # Also true for a fresh file such as cafe/x.txt declaring "cafe" with
        # output "."; it stays put rather than becoming cafe/cafe-x.txt.
        container = os.path.abspath(self.get_target_directory(category))
        return os.path.abspath(source.path.parent) == container
