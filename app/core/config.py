"""Application configuration settings."""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.stdlib.get_logger().bind(component="config")


class I18nSettings(BaseSettings):
    """Internationalization configuration settings.

    Languages:
    ----------
    I18N_LANGUAGES is a comma-separated list of language codes
    (e.g., "en-US,el-GR"). The first one is the default language. When empty,
    every language found in the translation files is registered, in discovery
    order, and I18N_DEFAULT_LANGUAGE can pick the default among them.

    Detection:
    ----------
    I18N_CONTEXT_KEY, I18N_URL_PARAMETER, I18N_COOKIE and I18N_SUBDOMAIN
    enable the corresponding request signals; the Accept-Language header is
    always used last.
    """

    I18N_LOCALES_GLOB: Optional[str] = None
    I18N_LANGUAGES: str = ""
    I18N_DEFAULT_LANGUAGE: Optional[str] = None

    I18N_CONTEXT_KEY: Optional[str] = None
    I18N_URL_PARAMETER: Optional[str] = None
    I18N_COOKIE: Optional[str] = None
    I18N_SUBDOMAIN: bool = False
    I18N_STRICT: bool = False

    I18N_TEMPLATE_LEFT: str = Field(default="{{", min_length=1)
    I18N_TEMPLATE_RIGHT: str = Field(default="}}", min_length=1)

    @field_validator(
        "I18N_LOCALES_GLOB",
        "I18N_DEFAULT_LANGUAGE",
        "I18N_CONTEXT_KEY",
        "I18N_URL_PARAMETER",
        "I18N_COOKIE",
        mode="before",
    )
    @classmethod
    def _empty_as_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def languages(self) -> List[str]:
        """Registered language codes, in priority order."""
        return [code.strip() for code in self.I18N_LANGUAGES.split(",") if code.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


class Settings(BaseSettings):
    """Application configuration settings."""

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    i18n: I18nSettings

    @property
    def is_production(self) -> bool:
        """Check if the application is running in production."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        settings_map = {
            "i18n": I18nSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create the settings instance
settings = Settings()
