"""Translation loading interface and implementations.

A loader is any callable that accepts the Matcher and returns a Localizer.
The built-in loaders read raw nested data (from memory, the file system or
packaged assets), resolve the language of every fragment through the Matcher,
flatten and overlay the fragments per language and build one Locale per
registered language.
"""

import fnmatch
import glob
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)

import structlog

from infrastructure.i18n.catalog import build_catalog
from infrastructure.i18n.decoders import decode
from infrastructure.i18n.errors import TranslationLoadError
from infrastructure.i18n.locale import Locale
from infrastructure.i18n.localizer import LocaleRegistry, Localizer
from infrastructure.i18n.matcher import Matcher
from infrastructure.i18n.models import Confidence
from infrastructure.i18n.tags import parse_tag

logger = structlog.get_logger()

Loader = Callable[[Matcher], Localizer]
FuncMap = Mapping[str, Callable[..., Any]]
FuncsFactory = Callable[[Locale], FuncMap]

# Per language index: ordered (source name, nested data) fragments.
LanguageSources = Dict[int, List[Tuple[str, Any]]]


@dataclass(frozen=True)
class LoaderConfig:
    """Options shared by the built-in loaders.

    Attributes:
        left: Template variable start delimiter.
        right: Template variable end delimiter.
        funcs: Template helpers, either a mapping shared by every locale or a
            callable returning the helpers for a given locale.
    """

    left: str = "{{"
    right: str = "}}"
    funcs: Union[FuncMap, FuncsFactory, None] = None


def build_localizer(
    matcher: Matcher,
    language_sources: LanguageSources,
    config: Optional[LoaderConfig] = None,
) -> LocaleRegistry:
    """Build a LocaleRegistry from raw fragments grouped by language index.

    Every registered language gets a Locale; languages without fragments get
    an empty one so lookups fall through to the default language.

    Args:
        matcher: Matcher holding the registered languages.
        language_sources: Fragments per language index, in overlay order.
        config: Loader options.

    Returns:
        LocaleRegistry with one slot per registered language.

    Raises:
        TranslationLoadError: If a fragment cannot be flattened.
    """
    config = config or LoaderConfig()
    shared_funcs = config.funcs if isinstance(config.funcs, Mapping) else None
    funcs_factory = None if shared_funcs is not None else config.funcs

    locales = []
    for index, tag in enumerate(matcher.languages):
        catalog = build_catalog(tag, language_sources.get(index, []))
        locale = Locale(
            index,
            catalog,
            funcs=shared_funcs,
            left=config.left,
            right=config.right,
        )
        if funcs_factory is not None:
            locale.set_funcs(funcs_factory(locale))

        logger.info(
            "loaded_translations",
            locale=locale.language,
            file_count=len(catalog.sources),
            message_count=len(catalog.messages),
        )
        locales.append(locale)

    return LocaleRegistry(locales)


class TranslationLoader(ABC):
    """Abstract base for the built-in loaders.

    Implementations define how raw fragments are found and decoded; the
    flattening and Locale construction are shared.
    """

    def __init__(self, config: Optional[LoaderConfig] = None):
        self.config = config or LoaderConfig()

    def __call__(self, matcher: Matcher) -> Localizer:
        """Load all translations for the matcher's languages.

        In open mode, languages found in the sources are registered on the
        matcher as a side effect.

        Raises:
            TranslationLoadError: If sources cannot be read or decoded.
        """
        language_sources = self.read_sources(matcher)
        return build_localizer(matcher, language_sources, self.config)

    @abstractmethod
    def read_sources(self, matcher: Matcher) -> LanguageSources:
        """Read raw fragments and group them by language index.

        Args:
            matcher: Matcher used to resolve (and in open mode, register)
                the language of each fragment.

        Returns:
            Fragments per language index, in overlay order.
        """


class MemoryTranslationLoader(TranslationLoader):
    """Loader for already decoded, in-memory translation data.

    Attributes:
        sources: (language code, nested data) pairs.
    """

    def __init__(
        self,
        sources: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]],
        config: Optional[LoaderConfig] = None,
    ):
        """Initialize memory loader.

        Args:
            sources: ``{code: data}`` or ``{code: [data, ...]}`` mapping, or an
                iterable of ``(code, data)`` pairs. Several fragments for the
                same language are overlaid in order.
            config: Loader options.
        """
        super().__init__(config)
        pairs: List[Tuple[str, Any]] = []
        items = sources.items() if isinstance(sources, Mapping) else sources
        for code, data in items:
            if isinstance(data, (list, tuple)):
                pairs.extend((code, fragment) for fragment in data)
            else:
                pairs.append((code, data))
        self.sources = pairs

    def read_sources(self, matcher: Matcher) -> LanguageSources:
        language_sources: LanguageSources = {}
        for position, (code, data) in enumerate(self.sources):
            tag = parse_tag(code)
            if tag.is_undefined:
                logger.warning("skipped_source_invalid_language", code=code)
                continue

            _, index, conf = matcher.match_or_add(tag)
            if conf <= Confidence.LOW:
                logger.warning("skipped_source_unregistered_language", code=code)
                continue

            language_sources.setdefault(index, []).append(
                (f"memory:{code}#{position}", data)
            )

        return language_sources


class FileTranslationLoader(TranslationLoader):
    """Base for loaders reading named, encoded resources.

    The language of each resource is inferred from its name (see
    ``infrastructure.i18n.paths``), its format from its extension.
    """

    @abstractmethod
    def list_names(self) -> Sequence[str]:
        """List candidate resource names."""

    @abstractmethod
    def read(self, name: str) -> bytes:
        """Read the raw content of a resource."""

    def read_sources(self, matcher: Matcher) -> LanguageSources:
        names = sorted(self.list_names())
        language_files = matcher.parse_language_files(names)
        if not language_files:
            raise TranslationLoadError(f"No translation files found in {self}")

        language_sources: LanguageSources = {}
        for index, file_names in language_files.items():
            for file_name in file_names:
                try:
                    raw = self.read(file_name)
                except OSError as e:
                    logger.error("translation_read_error", file=file_name, error=str(e))
                    raise TranslationLoadError(f"Failed to read {file_name}: {e}") from e

                try:
                    data = decode(file_name, raw)
                except TranslationLoadError as e:
                    logger.error("translation_parse_error", file=file_name, error=str(e))
                    raise

                language_sources.setdefault(index, []).append((file_name, data))

        return language_sources


class GlobTranslationLoader(FileTranslationLoader):
    """Loader for translation files matched by a glob pattern.

    Accepts layouts such as ``locales/<lang>/<name>.<ext>``,
    ``locales/<name>.<lang>.<ext>`` or ``locales/<name>_<lang>.<ext>``.

    Attributes:
        pattern: Glob pattern, ``**`` matches recursively.
    """

    def __init__(self, pattern: Union[str, Path], config: Optional[LoaderConfig] = None):
        super().__init__(config)
        self.pattern = str(pattern)

    def __str__(self) -> str:
        return self.pattern

    def list_names(self) -> Sequence[str]:
        return [
            name
            for name in glob.glob(self.pattern, recursive=True)
            if Path(name).is_file()
        ]

    def read(self, name: str) -> bytes:
        return Path(name).read_bytes()


class AssetsTranslationLoader(FileTranslationLoader):
    """Loader for embedded or packaged translation assets.

    Attributes:
        list_assets: Callable returning the available asset names.
        read_asset: Callable returning the raw bytes of an asset.
        pattern: Optional fnmatch pattern restricting the asset names.
    """

    def __init__(
        self,
        list_assets: Callable[[], Iterable[str]],
        read_asset: Callable[[str], bytes],
        pattern: Optional[str] = None,
        config: Optional[LoaderConfig] = None,
    ):
        super().__init__(config)
        self.list_assets = list_assets
        self.read_asset = read_asset
        self.pattern = pattern

    def __str__(self) -> str:
        return f"assets({self.pattern or '*'})"

    def list_names(self) -> Sequence[str]:
        names = list(self.list_assets())
        if self.pattern:
            names = [name for name in names if fnmatch.fnmatch(name, self.pattern)]
        return names

    def read(self, name: str) -> bytes:
        return self.read_asset(name)


def memory_loader(
    sources: Union[Mapping[str, Any], Iterable[Tuple[str, Any]]],
    config: Optional[LoaderConfig] = None,
) -> Loader:
    """Create a loader serving in-memory translation data."""
    return MemoryTranslationLoader(sources, config)


def glob_loader(
    pattern: Union[str, Path], config: Optional[LoaderConfig] = None
) -> Loader:
    """Create a loader reading translation files matched by ``pattern``."""
    return GlobTranslationLoader(pattern, config)


def assets_loader(
    list_assets: Callable[[], Iterable[str]],
    read_asset: Callable[[str], bytes],
    pattern: Optional[str] = None,
    config: Optional[LoaderConfig] = None,
) -> Loader:
    """Create a loader reading packaged assets through two callables."""
    return AssetsTranslationLoader(list_assets, read_asset, pattern, config)
