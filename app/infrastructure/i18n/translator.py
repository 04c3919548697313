"""Translation service for retrieving and rendering translated messages.

Ties the Matcher and the Localizer produced by a loader together and applies
the language detection and fallback policy.
"""

import threading
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from core.logging import get_module_logger
from infrastructure.i18n.locale import LocaleLike, nested_translate
from infrastructure.i18n.localizer import DefaultSwappable, LocaleRegistry, Localizer
from infrastructure.i18n.loader import Loader
from infrastructure.i18n.matcher import Matcher, make_tags
from infrastructure.i18n.models import LanguageTag, ResolutionConfig
from infrastructure.i18n.resolvers import (
    ACCEPT_LANGUAGE_HEADER,
    LocaleResolver,
    RequestContext,
    get_subdomain,
)

logger = get_module_logger()


@dataclass(frozen=True)
class _Published:
    matcher: Matcher
    localizer: Localizer


class Translator:
    """Service for translating messages by language code or by request.

    Usage:
        translator = Translator(glob_loader("./locales/*/*"), "en-US", "el-GR")
        translator.translate("el", "hi", {"Name": "kataras"})

    The first registered language is the default one. When no languages are
    given, every valid language found by the loader is registered in
    discovery order.

    Attributes:
        loader: Callable producing the Localizer for a Matcher.
        config: Language detection and fallback configuration.
    """

    def __init__(
        self,
        loader: Loader,
        *languages: str,
        config: Optional[ResolutionConfig] = None,
    ):
        """Initialize Translator and load translations.

        Args:
            loader: Callable producing the Localizer for a Matcher.
            languages: Registered language codes; empty for open mode.
            config: Language detection and fallback configuration.

        Raises:
            TranslationLoadError: If the initial load fails.
        """
        self.loader = loader
        self.config = config or ResolutionConfig()
        self._lock = threading.Lock()
        self._published = _Published(Matcher(make_tags(*languages)), _EmptyLocalizer())
        self._resolver = LocaleResolver(lambda: self._published.matcher, self.config)
        self.reload()
        logger.info("initialized_translator", languages=self.languages)

    @property
    def matcher(self) -> Matcher:
        """Currently published Matcher."""
        return self._published.matcher

    @property
    def localizer(self) -> Localizer:
        """Currently published Localizer."""
        return self._published.localizer

    @property
    def languages(self) -> List[str]:
        """Registered language codes in index order."""
        return [str(tag) for tag in self._published.matcher.languages]

    def reload(self) -> None:
        """Re-run the loader and publish the new translations.

        The loader runs against a copy of the current Matcher; the matcher
        and localizer are published together only when loading succeeds.

        Raises:
            TranslationLoadError: If loading fails. The previous translations
                stay in force.
        """
        with self._lock:
            matcher = self._published.matcher.copy()
            localizer = self.loader(matcher)
            self._published = _Published(matcher, localizer)
        logger.info("reloaded_all_translations", language_count=len(matcher.languages))

    def try_match_string(self, code: Optional[str]) -> Tuple[LanguageTag, int, bool]:
        """Match a language code against the registered languages.

        Returns:
            Tuple of (tag, index, ok); index is -1 when not matched.
        """
        return self._published.matcher.try_match_string(code)

    def set_default(self, code: str) -> bool:
        """Change the default language.

        A LocaleRegistry is swapped on a copy that is published together with
        the swapped matcher, so lookups already running keep a consistent
        pair. Other swappable localizers are swapped in place. The ``index``
        of the two swapped locales is updated on the shared Locale objects.

        Args:
            code: Language code of the new default language.

        Returns:
            True if the language is registered and the localizer supports
            changing its default, False otherwise.
        """
        with self._lock:
            published = self._published
            tag, index, ok = published.matcher.try_match_string(code)
            localizer = published.localizer
            if not ok or not isinstance(localizer, DefaultSwappable):
                return False

            if isinstance(localizer, LocaleRegistry):
                localizer = localizer.copy()
            if not localizer.set_default(index):
                return False

            matcher = published.matcher.copy()
            matcher.swap_default(index)
            self._published = _Published(matcher, localizer)

        logger.info("default_language_changed", language=str(tag), previous_index=index)
        return True

    def translate(self, code: str, key: str, *args: Any) -> str:
        """Render ``key`` in the language matching ``code``.

        Unknown or unparsable codes use the default language. Empty results
        fall back to the default language unless strict mode or a default
        message hook is configured.

        Args:
            code: Requested language code (e.g., "el", "en-US").
            key: Dotted message key.
            args: Template context or printf arguments.

        Returns:
            Rendered text, or an empty string if nothing was found.
        """
        published = self._published
        _, index, ok = published.matcher.try_match_string(code)
        if not ok:
            index = 0
        return self._render(published, index, code, key, args)

    tr = translate

    def resolve_index(self, ctx: RequestContext) -> int:
        """Resolve the language index of a request from its detection signals."""
        return self._resolver.resolve(ctx)[0]

    def get_locale(self, ctx: RequestContext) -> Optional[LocaleLike]:
        """Return the Locale of a request, the default one if nothing matched."""
        return self._published.localizer.get_locale(self.resolve_index(ctx))

    def render(self, locale: Optional[LocaleLike], key: str, *args: Any) -> str:
        """Render ``key`` with a previously resolved Locale.

        Applies the same fallback policy as ``translate``.
        """
        published = self._published
        index = locale.index if locale is not None else 0
        requested = locale.language if locale is not None else ""
        return self._render(published, index, requested, key, args)

    def get_message(self, ctx: RequestContext, key: str, *args: Any) -> str:
        """Render ``key`` in the language detected for a request."""
        published = self._published
        index, requested = self._resolver.resolve(ctx)
        return self._render(published, index, requested, key, args)

    def router_rewrite(self, ctx: RequestContext) -> RequestContext:
        """Strip a language prefix from the path or host of a request.

        ``/el-GR/some-path`` becomes ``/some-path`` (and, with subdomains
        enabled, ``el.example.com`` becomes ``example.com``) so one set of
        routes serves every language. The detected language is recorded in
        the Accept-Language header, the context key and the cookie, when
        configured.

        Args:
            ctx: Incoming request.

        Returns:
            The rewritten request, or ``ctx`` itself if no language was found.
        """
        segment = ctx.path[1:] if ctx.path.startswith("/") else ctx.path
        segment = segment.split("/", 1)[0]

        if segment:
            tag, _, ok = self.try_match_string(segment)
            if ok:
                rewritten = ctx.copy()
                rewritten.path = ctx.path[len(segment) + 1 :] or "/"
                return self._record_language(rewritten, str(tag))

        if self.config.subdomain:
            subdomain, host = get_subdomain(ctx.host)
            if subdomain:
                tag, _, ok = self.try_match_string(subdomain)
                if ok:
                    rewritten = ctx.copy()
                    rewritten.host = host
                    if "host" in rewritten.headers:
                        rewritten.headers["host"] = host
                    return self._record_language(rewritten, str(tag))

        return ctx

    def _record_language(self, ctx: RequestContext, language: str) -> RequestContext:
        if self.config.context_key is not None:
            ctx.values[self.config.context_key] = language
        if self.config.cookie:
            ctx.cookies[self.config.cookie] = language
        ctx.headers[ACCEPT_LANGUAGE_HEADER] = language
        logger.debug("language_prefix_routed", language=language, path=ctx.path)
        return ctx

    def _render(
        self,
        published: _Published,
        index: int,
        requested: str,
        key: str,
        args: Tuple[Any, ...],
    ) -> str:
        def nested(locale: LocaleLike, nested_key: str, *nested_args: Any) -> str:
            slot = locale.index
            if published.localizer.get_locale(index) is locale:
                slot = index
            elif published.localizer.get_locale(0) is locale:
                slot = 0
            return self._lookup(published, slot, requested, nested_key, nested_args)

        token = nested_translate.set(nested)
        try:
            return self._lookup(published, index, requested, key, args)
        finally:
            nested_translate.reset(token)

    def _lookup(
        self,
        published: _Published,
        index: int,
        requested: str,
        key: str,
        args: Tuple[Any, ...],
    ) -> str:
        config = self.config
        locale = published.localizer.get_locale(index)
        text = locale.get_message(key, *args) if locale is not None else ""

        if not text and index != 0 and config.default_message is None and not config.strict:
            default_locale = published.localizer.get_locale(0)
            if default_locale is not None:
                text = default_locale.get_message(key, *args)
                if text:
                    logger.debug(
                        "used_fallback_translation",
                        key=key,
                        requested_locale=requested,
                        fallback_locale=default_locale.language,
                    )

        if not text and config.default_message is not None:
            matched = locale.language if locale is not None else ""
            text = config.default_message(requested, matched, key, args)

        return text


class _EmptyLocalizer:
    """Localizer used before the first successful load."""

    def get_locale(self, index: int) -> Optional[LocaleLike]:
        return None
