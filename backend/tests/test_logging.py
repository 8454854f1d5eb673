import logging

import pytest

from league.core.config import settings
from league.core.logging import QUIET_LOGGERS, resolve_level, setup_logging


@pytest.mark.parametrize(
    "name, expected",
    [("debug", logging.DEBUG), ("WARNING", logging.WARNING), ("loud", logging.INFO)],
)
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected


def test_resolve_level_defaults_to_settings():
    assert resolve_level() == resolve_level(settings.LOG_LEVEL)


def test_setup_logging_levels(monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", True)

    setup_logging("WARNING")

    assert logging.getLogger("league").level == logging.DEBUG
    for name, level in QUIET_LOGGERS.items():
        assert logging.getLogger(name).level == level


def test_setup_logging_without_debug_follows_level(monkeypatch):
    monkeypatch.setattr(settings, "DEBUG", False)

    setup_logging("ERROR")

    assert logging.getLogger("league").level == logging.ERROR
