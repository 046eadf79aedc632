"""Typer CLI for the banking client."""
