"""Command-line interface for codepause."""
