"""Command line interface for Keyword Reviewer."""

from keyword_reviewer.cli.main import cli, main

__all__ = ["cli", "main"]
