"""
Exception types for autospec.

Hard errors (resolution, prerequisites, config) propagate to the CLI and are
shown to the user. HistoryError never leaves the history writer.
"""


class AutospecError(Exception):
    """Base class for all autospec errors."""
    pass


class FeatureNotFoundError(AutospecError):
    """No feature directory matched the request."""
    pass


class ResolutionError(AutospecError):
    """The current feature could not be determined."""
    pass


class PrerequisiteError(AutospecError):
    """A required feature directory or artifact is missing.

    Carries the missing item and the command that creates it so callers can
    render their own hint.
    """

    def __init__(self, message: str, missing: str | None = None, remedy: str | None = None):
        self.missing = missing
        self.remedy = remedy
        super().__init__(message)


class HistoryError(AutospecError):
    """History file could not be read or written."""
    pass


class ConfigError(AutospecError):
    """Configuration file or override is invalid."""
    pass
