"""
Tests for the logging setup
"""

import logging

import pytest

from logging_config import setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    yield root
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    logging.getLogger("matplotlib").setLevel(logging.NOTSET)
    logging.getLogger("PIL").setLevel(logging.NOTSET)


def test_handlers_not_duplicated(tmp_path, root_logger):
    log_file = tmp_path / "chladni.log"
    setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG, log_file=str(log_file))
    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 2
    logging.getLogger("plate_shapes").debug("test message")
    for handler in root_logger.handlers:
        handler.flush()
    assert "plate_shapes - DEBUG - test message" in log_file.read_text(encoding="utf-8")


def test_custom_format(tmp_path, root_logger):
    log_file = tmp_path / "chladni.log"
    setup_logging(logging.INFO, log_file=str(log_file), fmt="%(levelname)s|%(name)s|%(message)s")
    logging.getLogger("chladni_model").info("model reset")
    for handler in root_logger.handlers:
        handler.flush()
    assert "INFO|chladni_model|model reset" in log_file.read_text(encoding="utf-8")


def test_matplotlib_held_at_warning(root_logger):
    setup_logging(logging.DEBUG)
    assert logging.getLogger("matplotlib").level == logging.WARNING
    assert not logging.getLogger("matplotlib.font_manager").isEnabledFor(logging.DEBUG)
    assert logging.getLogger("particle_ensemble").isEnabledFor(logging.DEBUG)
