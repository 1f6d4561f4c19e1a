"""Plugman exceptions.

Only ConfigurationError is fatal to a run. Everything else is caught at the
smallest enclosing unit of work (file, asset, URL), logged, and skipped.
"""


class PlugmanError(Exception):
    """Base exception for plugman operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (url, asset, path, ...)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ConfigurationError(PlugmanError):
    """Invalid parameters, unreadable config file, or unusable target path."""


class ClassificationError(PlugmanError):
    """Input matches neither a direct file nor a repository reference."""


class FetchError(PlugmanError):
    """Download or release lookup failed."""


class ExtractionError(PlugmanError):
    """Archive is corrupt or unreadable."""


class InstallError(PlugmanError):
    """Copying or removing a file at the destination failed."""


class PromptUnavailableError(InstallError):
    """An overwrite decision was needed but no answer could be obtained."""
