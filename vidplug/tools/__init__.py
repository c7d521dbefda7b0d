"""
Developer Tooling - Build, sign, device testing and catalog submission.

This module contains the workflow steps behind the ``vidplug`` CLI commands,
kept free of terminal output so they can be driven from tests.
"""

from vidplug.tools.project import ProjectLayout, build_plugin
from vidplug.tools.signing import SigningResult, sign_plugin
from vidplug.tools.submission import SubmissionResult, submit_plugin
from vidplug.tools.discovery import DevPortalClient, DiscoveredDevice, discover_devices
from vidplug.tools.dev_server import create_app, start_server

__all__ = [
    # Project
    "ProjectLayout",
    "build_plugin",
    # Signing
    "SigningResult",
    "sign_plugin",
    # Submission
    "SubmissionResult",
    "submit_plugin",
    # Device testing
    "DevPortalClient",
    "DiscoveredDevice",
    "discover_devices",
    "create_app",
    "start_server",
]
