"""Locale resolution logic for determining a request's preferred language.

Provides the transport-neutral request value and the strategy trying each
configured detection signal in a fixed priority order.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

import structlog

from infrastructure.i18n.matcher import Matcher
from infrastructure.i18n.models import Confidence, ResolutionConfig
from infrastructure.i18n.tags import parse_accept_language

logger = structlog.get_logger().bind(component="i18n.resolver")

ACCEPT_LANGUAGE_HEADER = "accept-language"


@dataclass
class RequestContext:
    """Request-like value the language detection works on.

    Attributes:
        path: URL path (e.g., "/el-GR/some-path").
        host: Host, optionally with port (e.g., "el.example.com:8080").
        query: Query parameters.
        cookies: Request cookies.
        headers: Request headers, keys are matched case-insensitively.
        values: Request-scoped storage (e.g., a framework's request state).
    """

    path: str = "/"
    host: str = ""
    query: Dict[str, str] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    values: Dict[Any, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    def header(self, name: str, default: str = "") -> str:
        """Get a header value by case-insensitive name."""
        return self.headers.get(name.lower(), default)

    def copy(self) -> "RequestContext":
        """Return a copy with independent dicts."""
        return RequestContext(
            path=self.path,
            host=self.host,
            query=dict(self.query),
            cookies=dict(self.cookies),
            headers=dict(self.headers),
            values=dict(self.values),
        )

    @classmethod
    def from_request(cls, request: Any) -> "RequestContext":
        """Build a context from a Starlette/FastAPI request.

        Args:
            request: ``starlette.requests.Request``.

        Returns:
            RequestContext snapshot of the request; ``values`` mirrors the
            request state.
        """
        return cls(
            path=request.url.path,
            host=request.headers.get("host", "") or (request.url.netloc or ""),
            query=dict(request.query_params),
            cookies=dict(request.cookies),
            headers=dict(request.headers),
            values=dict(request.scope.get("state") or {}),
        )


def get_subdomain(host: str) -> Tuple[str, str]:
    """Split the first label off a host.

    "el.example.com" -> ("el", "example.com"); hosts without a dot yield
    ("", host).

    Args:
        host: Host, optionally with port.

    Returns:
        Tuple of (subdomain, remaining host).
    """
    index = host.find(".")
    if index > 0:
        return host[:index], host[index + 1 :]
    return "", host


class LocaleResolver:
    """Resolves the language index of a request from its detection signals.

    Signals are tried in fixed priority order until one matches a registered
    language with a confidence above LOW:

    1. value already stored under the context key
    2. custom extraction function
    3. URL query parameter
    4. cookie
    5. subdomain
    6. Accept-Language header (best of its weighted tags)

    If none matches, the default language (index 0) is used.
    """

    def __init__(
        self,
        matcher_provider: Callable[[], Matcher],
        config: Optional[ResolutionConfig] = None,
    ):
        """Initialize locale resolver.

        Args:
            matcher_provider: Returns the currently published Matcher.
            config: Detection signal configuration.
        """
        self._matcher_provider = matcher_provider
        self.config = config or ResolutionConfig()

    def _signals(self, ctx: RequestContext) -> Mapping[str, Callable[[], Optional[str]]]:
        config = self.config

        def from_context() -> Optional[str]:
            if config.context_key is None:
                return None
            value = ctx.values.get(config.context_key)
            return value if isinstance(value, str) else None

        def from_extract_func() -> Optional[str]:
            return config.extract_func(ctx) if config.extract_func else None

        def from_url_parameter() -> Optional[str]:
            return ctx.query.get(config.url_parameter) if config.url_parameter else None

        def from_cookie() -> Optional[str]:
            return ctx.cookies.get(config.cookie) if config.cookie else None

        def from_subdomain() -> Optional[str]:
            return get_subdomain(ctx.host)[0] if config.subdomain else None

        return {
            "context": from_context,
            "extract_func": from_extract_func,
            "url_parameter": from_url_parameter,
            "cookie": from_cookie,
            "subdomain": from_subdomain,
        }

    def resolve(self, ctx: RequestContext) -> Tuple[int, str]:
        """Resolve the language of a request.

        Args:
            ctx: Request to inspect.

        Returns:
            Tuple of (language index, raw code that matched). The code is
            empty when the default language was used.
        """
        matcher = self._matcher_provider()

        for source, extract in self._signals(ctx).items():
            value = extract()
            if not value:
                continue
            _, index, ok = matcher.try_match_string(value)
            if ok:
                logger.debug("resolved_language", source=source, code=value, index=index)
                return index, value

        header = ctx.header(ACCEPT_LANGUAGE_HEADER)
        index = self.resolve_from_header(header)
        if index is not None:
            return index, header

        return 0, ""

    def resolve_from_header(self, accept_language: Optional[str]) -> Optional[int]:
        """Resolve a language index from an Accept-Language header.

        Args:
            accept_language: Accept-Language header value.

        Returns:
            Index of the best registered match, or None if nothing matched
            with a confidence above LOW.
        """
        desired = parse_accept_language(accept_language)
        if not desired:
            return None

        _, index, conf = self._matcher_provider().match(*desired)
        if conf > Confidence.LOW:
            logger.debug("resolved_from_header", index=index)
            return index

        logger.debug("no_matching_locale_in_header", header=accept_language)
        return None
