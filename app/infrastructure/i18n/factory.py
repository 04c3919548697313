"""Factory functions for creating i18n components.

Provides convenience functions for initializing translators from the
application settings.
"""

from pathlib import Path
from typing import Optional

import structlog

from core.config import I18nSettings, settings as app_settings
from infrastructure.i18n.loader import Loader, LoaderConfig, glob_loader
from infrastructure.i18n.models import ResolutionConfig
from infrastructure.i18n.translator import Translator

logger = structlog.get_logger()


def default_locales_glob() -> str:
    """Default glob for translation files: ``<app>/locales/*/*``."""
    # This file is at .../app/infrastructure/i18n/factory.py
    app_root = Path(__file__).resolve().parents[2]
    return str(app_root / "locales" / "*" / "*")


def resolution_config_from_settings(i18n_settings: I18nSettings) -> ResolutionConfig:
    """Build the detection configuration from settings."""
    return ResolutionConfig(
        context_key=i18n_settings.I18N_CONTEXT_KEY,
        url_parameter=i18n_settings.I18N_URL_PARAMETER,
        cookie=i18n_settings.I18N_COOKIE,
        subdomain=i18n_settings.I18N_SUBDOMAIN,
        strict=i18n_settings.I18N_STRICT,
    )


def create_translator(
    i18n_settings: Optional[I18nSettings] = None,
    loader: Optional[Loader] = None,
    loader_config: Optional[LoaderConfig] = None,
    config: Optional[ResolutionConfig] = None,
) -> Translator:
    """Create and configure a Translator instance.

    Args:
        i18n_settings: i18n settings (default: application settings).
        loader: Custom loader (default: glob loader over I18N_LOCALES_GLOB,
            or ``app/locales/*/*``).
        loader_config: Options for the default glob loader (default: template
            delimiters from settings).
        config: Detection configuration (default: built from settings). Hooks
            such as ``extract_func`` or ``default_message`` can only be set
            here.

    Returns:
        Translator: Configured translator instance.

    Raises:
        TranslationLoadError: If the translations cannot be loaded.

    Usage:
        # Use defaults from environment
        translator = create_translator()

        # Custom translations
        translator = create_translator(loader=memory_loader({"en-US": {...}}))
    """
    i18n_settings = i18n_settings or app_settings.i18n

    if loader is None:
        pattern = i18n_settings.I18N_LOCALES_GLOB or default_locales_glob()
        loader_config = loader_config or LoaderConfig(
            left=i18n_settings.I18N_TEMPLATE_LEFT,
            right=i18n_settings.I18N_TEMPLATE_RIGHT,
        )
        loader = glob_loader(pattern, loader_config)

    translator = Translator(
        loader,
        *i18n_settings.languages,
        config=config or resolution_config_from_settings(i18n_settings),
    )

    default_language = i18n_settings.I18N_DEFAULT_LANGUAGE
    if default_language and not translator.set_default(default_language):
        logger.warning("default_language_not_registered", language=default_language)

    logger.info(
        "translator_created",
        languages=translator.languages,
        loader=str(loader),
    )
    return translator
