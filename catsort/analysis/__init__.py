"""
Analysis module: file discovery and category extraction.
"""

from .category import CategoryExtractor, extract_category
from .scanner import FileScanner, collect_files, glob_filter, suffix_filter

__all__ = [
    "CategoryExtractor",
    "extract_category",
    "FileScanner",
    "collect_files",
    "glob_filter",
    "suffix_filter",
]
