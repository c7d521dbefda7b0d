"""
CLI Commands - Individual command implementations.

This module contains the init, build, sign, test-device and submit command
implementations registered by the main app.
"""

from vidplug.cli.commands import build, init, submit, test_device

__all__ = ["init", "build", "submit", "test_device"]
