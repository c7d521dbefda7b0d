"""
CLI Layer - Command-line interface components.

This module contains the Typer-based CLI application and the developer
workflow command implementations.
"""

from vidplug.cli.main import app

__all__ = ["app"]
