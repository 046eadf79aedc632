"""Presentation layer (CLI)."""
