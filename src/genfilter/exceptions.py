"""
genfilter Exception Hierarchy

Structured exceptions for clear error handling across the library, the
scan pipeline and the CLI.  Each exception type maps to a specific
failure mode so that callers can handle errors precisely without parsing
message strings.

Usage::

    from genfilter.exceptions import GenfilterError, OperationCancelledError

    try:
        generated = is_generated_document(unit, cache, token)
    except OperationCancelledError:
        ...  # the host aborted the analysis pass; reissue later
"""

from concurrent.futures import CancelledError


class GenfilterError(Exception):
    """Base exception for all genfilter errors."""


class ConfigError(GenfilterError, ValueError):
    """Configuration is invalid (e.g. a non-positive worker count).

    Inherits from ``ValueError`` so callers that already catch
    ``ValueError`` from ``validate()`` keep working.
    """


class OperationCancelledError(GenfilterError, CancelledError):
    """The caller's cancellation token was triggered mid-classification.

    Inherits from :class:`concurrent.futures.CancelledError` so that
    executor-driven hosts treat it like any other cancelled work item.
    No verdict is cached for an aborted classification.
    """


class SourceReadError(GenfilterError, OSError):
    """A source file could not be read or decoded by the host-side loader."""
