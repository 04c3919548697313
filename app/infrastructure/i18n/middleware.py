"""Middleware serving every language from a single set of routes.

Usage:
    app = FastAPI()
    app.add_middleware(I18nMiddleware, translator=translator)

    # GET /el-GR/some-path is routed to /some-path with request.state.locale
    # set to the el-GR Locale.
"""

from http.cookies import SimpleCookie
from typing import Any, Dict, List, MutableMapping, Tuple

from starlette.middleware.base import BaseHTTPMiddleware

from infrastructure.i18n.resolvers import RequestContext
from infrastructure.i18n.translator import Translator


def _encode_cookies(cookies: Dict[str, str]) -> str:
    jar: SimpleCookie = SimpleCookie()
    for name, value in cookies.items():
        jar[name] = value
    return "; ".join(morsel.OutputString() for morsel in jar.values())


def apply_request_context(
    scope: MutableMapping[str, Any],
    original: RequestContext,
    rewritten: RequestContext,
) -> None:
    """Write the changes of a rewritten RequestContext back into an ASGI scope.

    Args:
        scope: ASGI connection scope, updated in place.
        original: Context the rewrite started from.
        rewritten: Context returned by ``Translator.router_rewrite``.
    """
    if rewritten.path != original.path:
        scope["path"] = rewritten.path
        scope["raw_path"] = rewritten.path.encode("utf-8")

    changed: Dict[str, str] = {
        name: value
        for name, value in rewritten.headers.items()
        if original.headers.get(name) != value
    }
    if rewritten.host != original.host:
        changed["host"] = rewritten.host
    if rewritten.cookies != original.cookies:
        changed["cookie"] = _encode_cookies(rewritten.cookies)

    if changed:
        headers: List[Tuple[bytes, bytes]] = [
            (name, value)
            for name, value in scope.get("headers", [])
            if name.decode("latin-1").lower() not in changed
        ]
        headers.extend(
            (name.encode("latin-1"), value.encode("latin-1"))
            for name, value in changed.items()
        )
        scope["headers"] = headers

    state = scope.setdefault("state", {})
    for key, value in rewritten.values.items():
        if isinstance(key, str):
            state[key] = value


class I18nMiddleware(BaseHTTPMiddleware):
    """Strips language prefixes and attaches the request's Locale.

    Attributes:
        translator: Translator applying the router rewrite and detection.
    """

    def __init__(self, app, translator: Translator):
        super().__init__(app)
        self.translator = translator

    async def dispatch(self, request, call_next):
        ctx = RequestContext.from_request(request)
        rewritten = self.translator.router_rewrite(ctx)
        if rewritten is not ctx:
            apply_request_context(request.scope, ctx, rewritten)

        request.state.locale = self.translator.get_locale(rewritten)
        response = await call_next(request)
        return response
