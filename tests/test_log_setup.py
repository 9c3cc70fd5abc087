import os
import sys
import logging

# Ensure repo package import
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iso8583_viewer import log_setup
from iso8583_viewer.iso_parser import parse


def test_setup_logging_writes_parser_debug_to_file(monkeypatch, tmp_path):
    logger = logging.getLogger(log_setup.LOGGER_NAME)
    monkeypatch.setattr(log_setup, "_configured", False)
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(logger, "level", logger.level)

    log_file = tmp_path / "logs" / "iso8583.log"
    configured = log_setup.setup_logging("debug", str(log_file))
    assert configured is logger
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    parse("0200400000000000000006123456")
    for handler in logger.handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "MTI: 0200" in text

    for handler in logger.handlers:
        handler.close()


def test_setup_logging_is_idempotent(monkeypatch):
    logger = logging.getLogger(log_setup.LOGGER_NAME)
    monkeypatch.setattr(log_setup, "_configured", False)
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(logger, "level", logger.level)

    log_setup.setup_logging("WARNING")
    log_setup.setup_logging("INFO")
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logger.handlers[0].level == logging.INFO


def test_unknown_level_name_falls_back_to_warning(monkeypatch):
    logger = logging.getLogger(log_setup.LOGGER_NAME)
    monkeypatch.setattr(log_setup, "_configured", False)
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(logger, "level", logger.level)

    log_setup.setup_logging("chatty")
    assert logger.level == logging.WARNING


def test_later_call_attaches_log_file(monkeypatch, tmp_path):
    logger = logging.getLogger(log_setup.LOGGER_NAME)
    monkeypatch.setattr(log_setup, "_configured", False)
    monkeypatch.setattr(logger, "handlers", [])
    monkeypatch.setattr(logger, "level", logger.level)

    log_setup.setup_logging("INFO")
    log_file = tmp_path / "late.log"
    log_setup.setup_logging("INFO", str(log_file))
    log_setup.setup_logging("INFO", str(log_file))
    assert len(logger.handlers) == 2

    logging.getLogger("iso8583_viewer.cli").info("attached later")
    for handler in logger.handlers:
        handler.flush()
    assert "attached later" in log_file.read_text(encoding="utf-8")

    for handler in logger.handlers:
        handler.close()
