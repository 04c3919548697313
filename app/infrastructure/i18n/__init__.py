"""i18n system - internationalization and localization framework.

Resolves, for a language preference and a message key, the translated text,
rendered with positional or named arguments, with per-language fallback and
request-side language detection.

Main components:
- models: LanguageTag, Confidence, TranslationCatalog, ResolutionConfig
- matcher: Matcher for tag matching and dynamic registration
- paths: language inference from resource paths
- catalog: flattening of nested sources into catalogs
- locale: Locale rendering template-style and printf-style messages
- localizer: Localizer protocol and LocaleRegistry
- loader: memory, glob and assets loaders
- resolvers: RequestContext and LocaleResolver for language detection
- translator: Translator facade with fallback policy and router rewrite
- middleware: Starlette/FastAPI middleware
"""

from infrastructure.i18n.errors import I18nError, TranslationLoadError
from infrastructure.i18n.factory import create_translator
from infrastructure.i18n.loader import (
    AssetsTranslationLoader,
    GlobTranslationLoader,
    Loader,
    LoaderConfig,
    MemoryTranslationLoader,
    TranslationLoader,
    assets_loader,
    glob_loader,
    memory_loader,
)
from infrastructure.i18n.locale import Locale, LocaleLike
from infrastructure.i18n.localizer import LocaleRegistry, Localizer
from infrastructure.i18n.matcher import Matcher
from infrastructure.i18n.models import (
    UNDEFINED,
    Confidence,
    LanguageTag,
    ResolutionConfig,
    TranslationCatalog,
)
from infrastructure.i18n.resolvers import LocaleResolver, RequestContext
from infrastructure.i18n.service import TranslationService
from infrastructure.i18n.tags import parse_accept_language, parse_tag
from infrastructure.i18n.translator import Translator

__all__ = [
    "UNDEFINED",
    "Confidence",
    "LanguageTag",
    "TranslationCatalog",
    "ResolutionConfig",
    "I18nError",
    "TranslationLoadError",
    "parse_tag",
    "parse_accept_language",
    "Matcher",
    "Locale",
    "LocaleLike",
    "Localizer",
    "LocaleRegistry",
    "Loader",
    "LoaderConfig",
    "TranslationLoader",
    "MemoryTranslationLoader",
    "GlobTranslationLoader",
    "AssetsTranslationLoader",
    "memory_loader",
    "glob_loader",
    "assets_loader",
    "RequestContext",
    "LocaleResolver",
    "Translator",
    "TranslationService",
    "create_translator",
]
