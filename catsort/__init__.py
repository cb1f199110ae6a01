"""catsort: move categorized text files into a flat, category-keyed layout.

Files declare their category on a ``category: <value>`` line. Each one is
moved to ``<category>/<encoded-original-directory>-<name>`` and the final
tree is fingerprinted with a locale-independent SHA-256 digest.
"""

from catsort.version import __version__

__all__ = ["__version__"]
