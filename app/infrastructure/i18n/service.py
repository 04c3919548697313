"""Translation service for dependency injection.

Provides a class-based interface to the i18n system for easier DI and testing.
"""

from typing import Any, List, Optional

from infrastructure.i18n.factory import create_translator
from infrastructure.i18n.locale import LocaleLike
from infrastructure.i18n.resolvers import RequestContext
from infrastructure.i18n.translator import Translator


class TranslationService:
    """Class-based translation service.

    Wraps one explicitly constructed Translator with a service interface to
    support dependency injection and easier testing with mocks.

    This is a thin facade - all actual work is delegated to the underlying
    Translator instance created by the factory.

    Usage:
        # Via dependency injection
        def get_translation_service() -> TranslationService:
            return service

        @router.get("/message")
        def get_message(
            request: Request,
            translation: TranslationService = Depends(get_translation_service),
        ):
            ctx = RequestContext.from_request(request)
            return {"message": translation.get_message(ctx, "common.welcome")}

        # Direct instantiation
        service = TranslationService()
        message = service.translate("el-GR", "common.welcome")
    """

    def __init__(self, translator: Optional[Translator] = None):
        """Initialize translation service.

        Args:
            translator: Optional pre-configured Translator instance.
                       If not provided, creates default via factory.
        """
        self._translator = translator or create_translator()

    def translate(self, language: str, key: str, *args: Any) -> str:
        """Render a message in the language matching ``language``.

        Args:
            language: Requested language code.
            key: Dotted message key.
            args: Template context or printf arguments.

        Returns:
            Rendered text, or an empty string if not found.
        """
        return self._translator.translate(language, key, *args)

    def get_locale(self, ctx: RequestContext) -> Optional[LocaleLike]:
        """Return the Locale detected for a request."""
        return self._translator.get_locale(ctx)

    def get_message(self, ctx: RequestContext, key: str, *args: Any) -> str:
        """Render a message in the language detected for a request."""
        return self._translator.get_message(ctx, key, *args)

    def set_default_language(self, language: str) -> bool:
        """Change the default language.

        Returns:
            True if the language is registered, False otherwise.
        """
        return self._translator.set_default(language)

    def get_available_languages(self) -> List[str]:
        """Get registered language codes, default first."""
        return self._translator.languages

    def reload(self) -> None:
        """Reload all translations from the loader."""
        self._translator.reload()

    @property
    def translator(self) -> Translator:
        """Access underlying Translator instance.

        Provided for advanced use cases that need direct access
        to the Translator API.

        Returns:
            The underlying Translator instance
        """
        return self._translator
