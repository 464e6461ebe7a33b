"""
Where: services/common/tests/test_logging_config.py
What: Unit tests for the YAML logging loader.
Why: Validate environment substitution and the missing-file fallback.
"""

import logging

from services.common.core import logging_config


LOGGING_YAML = """
version: 1
disable_existing_loggers: false
formatters:
  json:
    (): services.common.core.logging_config.CustomJsonFormatter
handlers:
  console:
    class: logging.StreamHandler
    formatter: json
loggers:
  remix-test:
    level: ${LOG_LEVEL}
    handlers: [console]
    propagate: false
"""


def test_setup_logging_substitutes_environment(tmp_path, monkeypatch):
    config_path = tmp_path / "logging.yml"
    config_path.write_text(LOGGING_YAML, encoding="utf-8")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    logging_config.setup_logging(str(config_path))

    logger = logging.getLogger("remix-test")
    assert logger.level == logging.WARNING
    assert isinstance(logger.handlers[0].formatter, logging_config.CustomJsonFormatter)


def test_setup_logging_defaults_log_level(tmp_path, monkeypatch):
    config_path = tmp_path / "logging.yml"
    config_path.write_text(LOGGING_YAML, encoding="utf-8")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    logging_config.setup_logging(str(config_path), log_level="DEBUG")

    assert logging.getLogger("remix-test").level == logging.DEBUG


def test_setup_logging_falls_back_to_basic_config(tmp_path, monkeypatch):
    captured = {}

    def fake_basic_config(**kwargs):
        captured.update(kwargs)

    monkeypatch.setattr(logging_config.logging, "basicConfig", fake_basic_config)

    logging_config.setup_logging(str(tmp_path / "missing.yml"), log_level="ERROR")

    assert captured == {"level": "ERROR"}
