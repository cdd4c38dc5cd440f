"""Test data factories for deterministic test data generation."""

from tests.factories.localization import (
    RecordingSource,
    make_configuration,
    make_entry,
    make_ini_files,
    make_resolver,
    make_translation,
)

__all__ = [
    "RecordingSource",
    "make_configuration",
    "make_entry",
    "make_ini_files",
    "make_resolver",
    "make_translation",
]
