"""Per-language message rendering.

A Locale owns one language's flattened catalog and renders its messages in
one of two styles, chosen per message:

- template style, when the message contains template delimiters
  (``Hello {{ Name }}``), rendered with Jinja2;
- printf style otherwise (``Hello %s``), rendered with ``sprintf``.

Pluralization is not computed here. Templates call helper functions from the
configured function set, passing a count found in the template context::

    HiDogs: "Hi {{ count }} {{ plural('dog', count) }}"
"""

import contextvars
import dataclasses
import threading
from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

import jinja2

from core.logging import get_module_logger
from infrastructure.i18n.formatting import sprintf
from infrastructure.i18n.models import LanguageTag, TranslationCatalog

logger = get_module_logger()

BLOCK_START = "{%"
BLOCK_END = "%}"

NestedTranslate = Callable[..., str]

# Lookup used by the ``tr`` template helper while a facade renders a message.
nested_translate: contextvars.ContextVar[Optional[NestedTranslate]] = (
    contextvars.ContextVar("nested_translate", default=None)
)

_NOT_A_TEMPLATE = object()


@runtime_checkable
class LocaleLike(Protocol):
    """Capability of a rendered language: serve messages by key."""

    index: int

    @property
    def tag(self) -> LanguageTag: ...

    @property
    def language(self) -> str: ...

    def get_message(self, key: str, *args: Any) -> str: ...


def is_template(message: str, left: str = "{{", right: str = "}}") -> bool:
    """Check whether a raw message uses template placeholders or blocks."""
    start = message.find(left)
    if start != -1 and message.find(right, start + len(left)) != -1:
        return True
    start = message.find(BLOCK_START)
    return start != -1 and message.find(BLOCK_END, start + len(BLOCK_START)) != -1


def template_context(args: Sequence[Any]) -> Dict[str, Any]:
    """Build the template context for the given message arguments.

    A single mapping is used as the context itself; a single record
    (dataclass, pydantic model or plain object) exposes its public attributes.
    The positional arguments are always reachable as ``args``, and an integer
    first argument is exposed as ``PluralCount``.

    Args:
        args: Arguments passed to the lookup.

    Returns:
        Template context dict.
    """
    context: Dict[str, Any] = {}
    if len(args) == 1:
        value = args[0]
        if isinstance(value, Mapping):
            context.update(value)
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            context.update(
                {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
            )
        elif hasattr(type(value), "model_fields"):
            context.update(
                {name: getattr(value, name) for name in type(value).model_fields}
            )
        elif hasattr(value, "__dict__") and not isinstance(value, type):
            context.update(
                {k: v for k, v in vars(value).items() if not k.startswith("_")}
            )

    context.setdefault("args", list(args))
    if (
        args
        and isinstance(args[0], int)
        and not isinstance(args[0], bool)
        and "PluralCount" not in context
    ):
        context["PluralCount"] = args[0]
    return context


class Locale:
    """Render-ready messages of a single language.

    Attributes:
        index: Position of the language in the registered list.
        catalog: Flattened messages of the language.
        funcs: Helper functions available to every template.
    """

    def __init__(
        self,
        index: int,
        catalog: TranslationCatalog,
        funcs: Optional[Mapping[str, Callable[..., Any]]] = None,
        left: str = "{{",
        right: str = "}}",
    ):
        """Initialize Locale.

        Args:
            index: Position of the language in the registered list.
            catalog: Flattened messages of the language.
            funcs: Helper functions installed as template globals.
            left: Template variable start delimiter.
            right: Template variable end delimiter.
        """
        self.index = index
        self.catalog = catalog
        self.funcs: Dict[str, Callable[..., Any]] = dict(funcs or {})
        self.left = left
        self.right = right

        self._env = jinja2.Environment(
            variable_start_string=left,
            variable_end_string=right,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self._env.globals.update(self.funcs)
        self._env.globals["tr"] = self._nested_tr
        self._templates: Dict[str, Any] = {}
        self._templates_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Locale(index={self.index}, language={self.language!r})"

    @property
    def tag(self) -> LanguageTag:
        """Language tag of this locale."""
        return self.catalog.tag

    @property
    def language(self) -> str:
        """Language code of this locale (e.g., "en-US")."""
        return str(self.catalog.tag)

    def has_message(self, key: str) -> bool:
        """Check if the locale has a message for ``key``."""
        return self.catalog.has_message(key)

    def set_funcs(self, funcs: Mapping[str, Callable[..., Any]]) -> None:
        """Install additional template helpers.

        Must be called before any message is rendered, compiled templates
        keep the globals they were compiled with.
        """
        self.funcs.update(funcs)
        self._env.globals.update(funcs)

    def get_message(self, key: str, *args: Any) -> str:
        """Render the message stored under ``key``.

        Args:
            key: Dotted message key.
            args: Template context or printf arguments.

        Returns:
            Rendered text, or an empty string if the key does not exist.
        """
        message = self.catalog.get_message(key)
        if message is None:
            return ""

        template = self._template(key, message)
        if template is None:
            return sprintf(message, args)

        try:
            return template.render(template_context(args))
        except Exception as e:
            logger.warning(
                "template_render_failed",
                key=key,
                language=self.language,
                error=str(e),
            )
            return sprintf(message, args)

    def _template(self, key: str, message: str) -> Optional[jinja2.Template]:
        """Return the compiled template for ``key``, compiling it once."""
        cached = self._templates.get(key)
        if cached is None:
            cached = self._compile(key, message)
            with self._templates_lock:
                cached = self._templates.setdefault(key, cached)

        return None if cached is _NOT_A_TEMPLATE else cached

    def _compile(self, key: str, message: str) -> Any:
        if not is_template(message, self.left, self.right):
            return _NOT_A_TEMPLATE
        try:
            return self._env.from_string(message)
        except jinja2.TemplateSyntaxError as e:
            logger.warning(
                "template_compile_failed",
                key=key,
                language=self.language,
                error=str(e),
            )
            return _NOT_A_TEMPLATE

    def _nested_tr(self, key: str, *args: Any) -> str:
        lookup = nested_translate.get()
        if lookup is not None:
            return lookup(self, key, *args)
        return self.get_message(key, *args)
