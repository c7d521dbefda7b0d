"""
Error Handler - Error panels with context and suggestions.

This module provides consistent error display across the CLI with helpful
context and actionable suggestions per error type.
"""

import traceback
from typing import List, Optional

from rich.markup import escape
from rich.panel import Panel

from vidplug.core.exceptions import (
    ConfigurationError,
    GraphQLError,
    NetworkError,
    PluginError,
    ToolingError,
    VidPlugError,
)
from vidplug.ui.console import get_console
from vidplug.ui.themes import get_palette


class ErrorHandler:
    """Handles error display with consistent formatting and helpful context."""

    def __init__(self):
        self.palette = get_palette()

    @property
    def console(self):
        return get_console()

    def handle_error(
        self,
        error: Exception,
        context: Optional[str] = None,
        show_traceback: bool = False
    ) -> None:
        """
        Handle and display an error with appropriate formatting.

        Args:
            error: Exception to handle
            context: Additional context about where the error occurred
            show_traceback: Whether to show the full traceback
        """
        if isinstance(error, ConfigurationError):
            self._display_configuration_error(error, context, show_traceback)
        elif isinstance(error, NetworkError):
            self._display_network_error(error, context, show_traceback)
        elif isinstance(error, ToolingError):
            self._display_tooling_error(error, context, show_traceback)
        elif isinstance(error, GraphQLError):
            self._display_graphql_error(error, context, show_traceback)
        elif isinstance(error, VidPlugError):
            self._display_vidplug_error(error, context, show_traceback)
        else:
            self._handle_generic_error(error, context, show_traceback)

    def _render(
        self,
        title: str,
        message: str,
        lines: List[str],
        suggestions: List[str],
        details: Optional[object] = None,
        show_traceback: bool = False,
    ) -> None:
        content_parts = [f"[{self.palette.error}]{escape(message)}[/{self.palette.error}]"]
        content_parts.extend(lines)

        if suggestions:
            content_parts.append(f"\n[{self.palette.info}]💡 Suggestions:[/{self.palette.info}]")
            for suggestion in suggestions:
                content_parts.append(f"• {suggestion}")

        if details:
            content_parts.append(f"\n[dim]Details:[/dim]\n{escape(str(details))}")

        if show_traceback:
            content_parts.append(f"\n[dim]Traceback:[/dim]\n{escape(traceback.format_exc())}")

        self.console.print(Panel(
            "\n".join(content_parts),
            title=title,
            border_style=self.palette.error,
            padding=(1, 2)
        ))

    @staticmethod
    def _context_line(context: Optional[str]) -> List[str]:
        return [f"\n[dim]Context:[/dim] {context}"] if context else []

    def _display_configuration_error(self, error: ConfigurationError, context: Optional[str], show_traceback: bool) -> None:
        lines = self._context_line(context)
        if error.config_path:
            lines.insert(0, f"\n[dim]Configuration file:[/dim] [cyan]{error.config_path}[/cyan]")

        self._render(
            "⚙️  Configuration Error",
            error.message,
            lines,
            [
                "Check config.json syntax and format",
                "Verify settings\\[baseUrl].options lists at least one URL",
                "Rebuild with [cyan]vidplug build[/cyan]",
            ],
            error.details if show_traceback else None,
            show_traceback,
        )

    def _display_network_error(self, error: NetworkError, context: Optional[str], show_traceback: bool) -> None:
        lines = self._context_line(context)
        if error.url:
            lines.insert(0, f"\n[dim]URL:[/dim] [cyan]{error.url}[/cyan]")
        if error.status_code:
            lines.insert(1, f"[dim]Status:[/dim] {error.status_code}")

        self._render(
            "🌐 Network Error",
            error.message,
            lines,
            [
                "Check that the device and this machine are on the same network",
                "Make sure developer mode is enabled in the app settings",
                "Pass the device address explicitly with [cyan]--dev-ip[/cyan]",
            ],
            None,
            show_traceback,
        )

    def _display_tooling_error(self, error: ToolingError, context: Optional[str], show_traceback: bool) -> None:
        lines = self._context_line(context)
        if error.command:
            lines.insert(0, f"\n[dim]Command:[/dim] [cyan]{error.command}[/cyan]")

        self._render(
            "🔧 Tooling Error",
            error.message,
            lines,
            [
                "Run [cyan]vidplug init[/cyan] to check required tools",
                "Make sure git, gh and openssl are on your PATH",
            ],
            error.details,
            show_traceback,
        )

    def _display_graphql_error(self, error: GraphQLError, context: Optional[str], show_traceback: bool) -> None:
        lines = self._context_line(context)
        if error.code:
            lines.insert(0, f"\n[dim]Code:[/dim] {error.code}")
        if error.operation_name:
            lines.append(f"[dim]Operation:[/dim] {error.operation_name}")

        self._render("🧩 GraphQL Error", error.message, lines, [], error.errors, show_traceback)

    def _display_vidplug_error(self, error: VidPlugError, context: Optional[str], show_traceback: bool) -> None:
        lines = self._context_line(context)
        if isinstance(error, PluginError) and error.plugin_name:
            lines.insert(0, f"\n[dim]Plugin:[/dim] {error.plugin_name}")

        self._render(f"❌ {error.kind}", error.message, lines, [], error.details, show_traceback)

    def _handle_generic_error(self, error: Exception, context: Optional[str], show_traceback: bool) -> None:
        self._render(
            "💥 Unexpected Error",
            f"{error.__class__.__name__}: {error}",
            self._context_line(context),
            [
                "Check the command syntax and arguments",
                "Run again with [cyan]--debug[/cyan] for detailed logs",
            ],
            None,
            show_traceback,
        )

    def display_warning(self, message: str, title: str = "⚠️  Warning") -> None:
        self.console.print(Panel(
            f"[{self.palette.warning}]{message}[/{self.palette.warning}]",
            title=f"[{self.palette.warning}]{title}[/{self.palette.warning}]",
            border_style=self.palette.warning,
            padding=(1, 2)
        ))

    def display_info(self, message: str, title: str = "ℹ️  Information") -> None:
        self.console.print(Panel(
            f"[{self.palette.info}]{message}[/{self.palette.info}]",
            title=f"[{self.palette.info}]{title}[/{self.palette.info}]",
            border_style=self.palette.info,
            padding=(1, 2)
        ))


# Global error handler instance
_error_handler = ErrorHandler()


def get_error_handler() -> ErrorHandler:
    return _error_handler


def handle_error(
    error: Exception,
    context: Optional[str] = None,
    show_traceback: bool = False
) -> None:
    """
    Handle and display an error using the global error handler.

    Args:
        error: Exception to handle
        context: Additional context
        show_traceback: Whether to show traceback
    """
    _error_handler.handle_error(error, context, show_traceback)


def display_warning(message: str, title: str = "⚠️  Warning") -> None:
    """Display a warning message using the global error handler."""
    _error_handler.display_warning(message, title)


def display_info(message: str, title: str = "ℹ️  Information") -> None:
    """Display an information message using the global error handler."""
    _error_handler.display_info(message, title)


__all__ = [
    "ErrorHandler",
    "get_error_handler",
    "handle_error",
    "display_warning",
    "display_info",
]
