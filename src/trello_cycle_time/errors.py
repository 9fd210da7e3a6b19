"""Custom exception types for the Trello cycle time report."""


class CycleTimeReportError(Exception):
    """Base exception for all recoverable cycle time report errors."""


class ConfigurationError(CycleTimeReportError):
    """Raised when runtime configuration values are missing or invalid."""


class AuthenticationError(CycleTimeReportError):
    """Raised when Trello API credentials are unavailable or rejected."""


class ApiError(CycleTimeReportError):
    """Raised when a Trello API request fails or returns an unexpected response."""


class LabelNotFoundError(ApiError):
    """Raised when a label name cannot be resolved on the configured board."""
