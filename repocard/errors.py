"""
Exception hierarchy for RepoCard Studio.

Every error raised by the package derives from ``RepoCardError`` so the CLI
can report them with a single ``except`` clause. Export I/O failures are not
raised at all; they are reported through ``ExportResult``.
"""


class RepoCardError(Exception):
    """Base exception for all RepoCard Studio errors."""


class InvalidIdentifierError(RepoCardError, ValueError):
    """Raised when a repository identifier is empty or cannot be parsed."""


class FetchError(RepoCardError, RuntimeError):
    """Raised when the metadata source cannot deliver repository data."""


class UnknownTemplateError(RepoCardError, ValueError):
    """Raised when a card template identifier is not recognized."""


class InvalidColorError(RepoCardError, ValueError):
    """Raised when a style color is not a 6-digit hex string."""
