"""Index-addressed collections of locales."""

from typing import Iterator, List, Optional, Protocol, Sequence, runtime_checkable

from core.logging import get_module_logger
from infrastructure.i18n.locale import LocaleLike

logger = get_module_logger()


@runtime_checkable
class Localizer(Protocol):
    """Serves the Locale registered at a language index.

    Index ``i`` always corresponds to ``Matcher.languages[i]``.
    """

    def get_locale(self, index: int) -> Optional[LocaleLike]: ...


@runtime_checkable
class DefaultSwappable(Protocol):
    """Localizer that supports changing which locale answers to index 0."""

    def set_default(self, index: int) -> bool: ...


class LocaleRegistry:
    """In-memory Localizer with one slot per registered language."""

    def __init__(self, locales: Sequence[Optional[LocaleLike]]):
        self._locales: List[Optional[LocaleLike]] = list(locales)

    def __len__(self) -> int:
        return len(self._locales)

    def __iter__(self) -> Iterator[Optional[LocaleLike]]:
        return iter(self._locales)

    def get_locale(self, index: int) -> Optional[LocaleLike]:
        """Return the Locale at ``index``, or None if out of range."""
        if index < 0 or index >= len(self._locales):
            return None
        return self._locales[index]

    def copy(self) -> "LocaleRegistry":
        """Return a registry over the same locales with its own slots."""
        return LocaleRegistry(self._locales)

    def set_default(self, index: int) -> bool:
        """Swap the locale at ``index`` with the default one at index 0.

        The stored index of both locales is updated so that
        ``get_locale(i).index == i`` keeps holding.

        Args:
            index: Slot of the new default locale.

        Returns:
            True if swapped, False if the index is out of range.
        """
        if index < 0 or index >= len(self._locales):
            return False

        previous, chosen = self._locales[0], self._locales[index]
        self._locales[0], self._locales[index] = chosen, previous
        if chosen is not None:
            chosen.index = 0
        if previous is not None:
            previous.index = index

        logger.info(
            "default_locale_swapped",
            index=index,
            language=chosen.language if chosen is not None else None,
        )
        return True
