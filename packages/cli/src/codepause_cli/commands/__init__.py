"""Subcommands registered on the codepause group."""
