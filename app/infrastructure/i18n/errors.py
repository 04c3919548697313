"""Exceptions raised by the i18n system.

Only ingestion problems are reported as exceptions. Tag parsing, missing keys
and template failures degrade to a default value instead of raising.
"""


class I18nError(Exception):
    """Base class for all i18n errors."""


class TranslationLoadError(I18nError, ValueError):
    """Raised when translation resources cannot be enumerated, decoded or flattened.

    A reload that raises this error is discarded as a whole; the previously
    published translations stay in force.
    """
