import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `core.config`) works during pytest collection. Pytest may
# import `conftest` before the project root is on sys.path depending on
# invocation; add it explicitly here before importing application modules.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding static test resources."""
    return FIXTURES_DIR


@pytest.fixture
def i18n_fixtures_dir(fixtures_dir) -> Path:
    """Directory holding sample translation files."""
    return fixtures_dir / "i18n"
