"""Command-line interface for catsort."""
