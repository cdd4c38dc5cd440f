import sys
from pathlib import Path

# Ensure the application package root is on sys.path so importing application
# modules (e.g. `core.config`) works during pytest collection.
project_root = str(Path(__file__).resolve().parents[1])
if project_root not in sys.path:
    sys.path.insert(0, project_root)

import pytest  # noqa: E402

from localization.parsers.registry import ParserRegistry  # noqa: E402
from localization.templates.parser import parse_template  # noqa: E402
from tests.factories.localization import (  # noqa: E402
    RecordingSource,
    make_ini_files,
)


@pytest.fixture(autouse=True)
def clear_template_cache():
    """Start every test with an empty parsed-template cache."""
    parse_template.cache_clear()
    yield
    parse_template.cache_clear()


@pytest.fixture
def registry():
    """Registry holding all built-in parsers with default options."""
    return ParserRegistry.default()


@pytest.fixture
def memory_source():
    """Recording in-memory source over the default ini translation set."""
    return RecordingSource(make_ini_files())


@pytest.fixture
def translations_dir(tmp_path):
    """Create a temporary directory with an ini translation set.

    Returns a directory structure like:
    - strings.cfg
    - strings.ini
    - strings_de-DE.ini
    - strings_de-AT.ini
    """
    (tmp_path / "strings.cfg").write_text(
        "default_file=strings.ini\ndefault_locale=en-US\n", encoding="utf-8"
    )
    for name, content in make_ini_files().items():
        (tmp_path / name).write_text(content, encoding="utf-8")
    return tmp_path


def pytest_configure(config):
    """Register localization test markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
