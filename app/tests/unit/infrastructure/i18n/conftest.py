"""Feature-level fixtures for i18n system tests.

Provides translators and loaders over the sample translation files and
in-memory data.
"""

import pytest

from infrastructure.i18n import (
    ResolutionConfig,
    Translator,
    glob_loader,
    memory_loader,
)
from tests.factories.i18n import make_translation_data


@pytest.fixture
def locales_glob(i18n_fixtures_dir):
    """Glob over the sample files laid out as ``locales/<lang>/<name>.<ext>``."""
    return str(i18n_fixtures_dir / "locales" / "*" / "*")


@pytest.fixture
def single_dir_glob(i18n_fixtures_dir):
    """Glob over the sample files laid out as ``<name>.<lang>.<ext>``."""
    return str(i18n_fixtures_dir / "single" / "*")


@pytest.fixture
def file_translator(locales_glob):
    """Translator over the sample files with en-US as the default language."""
    return Translator(glob_loader(locales_glob), "en-US", "el-GR")


@pytest.fixture
def sample_translation_data():
    """In-memory translation data for en-US and el-GR."""
    return {
        "en-US": make_translation_data("en-US"),
        "el-GR": make_translation_data("el-GR"),
    }


@pytest.fixture
def memory_translator(sample_translation_data):
    """Translator over in-memory data with en-US as the default language."""
    return Translator(memory_loader(sample_translation_data), "en-US", "el-GR")


@pytest.fixture
def make_translator(sample_translation_data):
    """Build a Translator over the in-memory data with custom options."""

    def _make(*languages, **config_options):
        return Translator(
            memory_loader(sample_translation_data),
            *(languages or ("en-US", "el-GR")),
            config=ResolutionConfig(**config_options),
        )

    return _make
