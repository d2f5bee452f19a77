"""
Logging Configuration
Routes the plate, grain and model loggers to the console and an optional file.
"""
import logging
import sys
from typing import Iterable, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# matplotlib logs font and backend lookups at DEBUG while the demo animates
NOISY_LOGGERS = ("matplotlib", "PIL")


def setup_logging(level: int = logging.INFO,
                  log_file: Optional[str] = None,
                  fmt: str = LOG_FORMAT,
                  quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """
    Configures the root logger. The modules are top-level, so each one's
    logging.getLogger(__name__) logger propagates straight to it.

    Args:
        level: Logging level for the Chladni modules (e.g. logging.DEBUG to see
            mode cache refills and resonance curve recomputes).
        log_file: Optional path to save logs to a file.
        fmt: Record format shared by every handler.
        quiet: Third-party loggers held at WARNING whatever `level` is.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Avoid duplicate lines when called twice
    if root.hasHandlers():
        root.handlers.clear()

    formatter = logging.Formatter(fmt, datefmt='%H:%M:%S')
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).info("Logging initialized at %s.", logging.getLevelName(level))
