import logging

import pytest
from rich.logging import RichHandler

from subject_rules.config import SubjectRulesConfig
from subject_rules.exceptions import ConfigurationError
from subject_rules.logging_setup import resolve_log_level, setup_logging


@pytest.fixture
def root_logger(monkeypatch):
    monkeypatch.delenv("SUBJECT_RULES_LOG_LEVEL", raising=False)
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level

    yield root

    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def rich_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, RichHandler)]


def test_installs_rich_handler_at_level(root_logger):
    handler = setup_logging("debug")

    assert root_logger.level == logging.DEBUG
    assert handler.level == logging.DEBUG
    assert rich_handlers(root_logger) == [handler]


def test_repeated_setup_keeps_one_rich_handler(root_logger):
    other = logging.NullHandler()
    root_logger.addHandler(other)

    setup_logging("info")
    handler = setup_logging("warning")

    assert rich_handlers(root_logger) == [handler]
    assert other in root_logger.handlers
    assert root_logger.level == logging.WARNING


def test_level_from_config(root_logger):
    config = SubjectRulesConfig()
    config.system.log_level = "ERROR"

    handler = setup_logging(config=config)

    assert handler.level == logging.ERROR
    assert root_logger.level == logging.ERROR


def test_level_from_environment(root_logger, monkeypatch):
    monkeypatch.setenv("SUBJECT_RULES_LOG_LEVEL", "warning")

    assert resolve_log_level() == "WARNING"
    assert resolve_log_level("debug") == "DEBUG"


def test_defaults_to_info(root_logger):
    assert resolve_log_level() == "INFO"


def test_rejects_unknown_level(root_logger):
    before = root_logger.handlers[:]

    with pytest.raises(ConfigurationError) as exc_info:
        setup_logging("loud")

    assert "DEBUG" in exc_info.value.context["valid_levels"]
    assert root_logger.handlers == before
