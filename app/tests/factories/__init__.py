"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    make_catalog,
    make_locale,
    make_request_context,
    make_translation_data,
)

__all__ = [
    "make_catalog",
    "make_locale",
    "make_request_context",
    "make_translation_data",
]
