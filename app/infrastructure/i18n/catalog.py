"""Flattening of nested translation sources into message catalogs.

Source data is a tree of mappings whose leaves are messages::

    cart:
      checkout: "checkout - {{ Param }}"

becomes ``{"cart.checkout": "checkout - {{ Param }}"}``.
"""

from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from infrastructure.i18n.errors import TranslationLoadError
from infrastructure.i18n.models import LanguageTag, TranslationCatalog

KEY_SEPARATOR = "."


def _leaf_to_message(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise TranslationLoadError(
        f"Unsupported value of type {type(value).__name__} for key '{key}'"
    )


def flatten(tree: Mapping[Any, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten a nested mapping into dotted keys.

    Args:
        tree: Nested mapping; leaves are strings (numbers and booleans are
            stringified, None leaves are skipped).
        prefix: Key prefix for the current depth.

    Returns:
        Flat dict {dotted_key: message}.

    Raises:
        TranslationLoadError: If a leaf is a list or another unsupported type.
    """
    flat: Dict[str, str] = {}
    for name, value in tree.items():
        key = f"{prefix}{KEY_SEPARATOR}{name}" if prefix else str(name)
        if value is None:
            continue
        if isinstance(value, Mapping):
            flat.update(flatten(value, key))
        else:
            flat[key] = _leaf_to_message(key, value)

    return flat


def build_catalog(
    tag: LanguageTag,
    sources: Iterable[Tuple[str, Optional[Mapping[Any, Any]]]],
) -> TranslationCatalog:
    """Build one language's catalog from its source fragments.

    Fragments are overlaid in order: on a key collision the later fragment
    wins, other keys of earlier fragments are kept.

    Args:
        tag: Language of the catalog.
        sources: Pairs of (source identifier, nested data).

    Returns:
        TranslationCatalog with the merged flat messages.

    Raises:
        TranslationLoadError: If a fragment is not a mapping or contains
            unsupported values.
    """
    catalog = TranslationCatalog(tag=tag)
    for source_name, data in sources:
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TranslationLoadError(
                f"Translation source {source_name} must be a mapping, "
                f"got {type(data).__name__}"
            )
        try:
            messages = flatten(data)
        except TranslationLoadError as e:
            raise TranslationLoadError(f"{source_name}: {e}") from e

        catalog.merge(
            TranslationCatalog(tag=tag, messages=messages, sources=[source_name])
        )

    return catalog
