"""Tests for logging setup."""

import logging

import pytest

from backend.logging_config import FIGHT_LOGGER, configure_logging


@pytest.fixture(autouse=True)
def restore_levels(monkeypatch):
    monkeypatch.delenv("BUGFIGHTS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("BUGFIGHTS_FIGHT_LOG_LEVEL", raising=False)
    names = ("", "bugfights", FIGHT_LOGGER)
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_explicit_level():
    logger = configure_logging(level="debug")
    assert logger.name == "bugfights"
    assert logger.level == logging.DEBUG
    assert logging.getLogger(FIGHT_LOGGER).level == logging.DEBUG


def test_fight_level_from_env(monkeypatch):
    monkeypatch.setenv("BUGFIGHTS_FIGHT_LOG_LEVEL", "WARNING")
    configure_logging(level="INFO")
    assert logging.getLogger(FIGHT_LOGGER).level == logging.WARNING
    assert logging.getLogger("bugfights").level == logging.INFO


def test_unknown_level_rejected():
    with pytest.raises(ValueError, match="LOUD"):
        configure_logging(level="LOUD")
