"""Custom exceptions for vault2gm."""


class Vault2gmError(Exception):
    """Base exception for vault2gm operations."""

    status_code = 500


class NotSelectedError(Vault2gmError):
    """No entry document has been selected for export."""

    status_code = 400


class PageNotFoundError(Vault2gmError):
    """A page slug does not resolve to any document in the vault."""

    status_code = 404


class ReadFailureError(Vault2gmError):
    """Error while reading from the vault."""


class InvalidPathError(ReadFailureError):
    """Path is outside the vault or does not name a markdown document."""


class BindError(Vault2gmError):
    """Server or tunnel could not be bound."""


class SettingsError(Vault2gmError):
    """Persisted settings could not be read."""
