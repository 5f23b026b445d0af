import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.logging import RichHandler

from skillshelf.log import LOGGER_NAME, configure_logging


def test_configure_logging_replaces_handlers() -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    assert logger.name == LOGGER_NAME
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)
    assert logger.handlers[0].level == logging.DEBUG


def test_configure_logging_writes_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "skillshelf.log"
    logger = configure_logging(log_file=log_file)

    logging.getLogger(f"{LOGGER_NAME}.files.store").info("Renamed a -> b")
    for handler in logger.handlers:
        handler.flush()

    assert any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers)
    assert "Renamed a -> b" in log_file.read_text(encoding="utf-8")
    configure_logging()
