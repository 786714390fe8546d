"""
Logging Configuration
Sets up the package logger for the simulator and its web UI.
"""
import logging
import sys
from typing import Iterable, Optional

# The Dash dev server logs one line per request; the tick interval alone
# fires twice a second.
NOISY_LOGGERS = ("werkzeug",)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """
    Configures the 'malware_sim' logger and quiets request logging.

    Args:
        level: Logging level for simulator messages.
        log_file: Optional path to also write the simulator log to.
        quiet_loggers: Third-party loggers capped at WARNING so interval
            polling does not drown out step and lifecycle messages.
    """
    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger("malware_sim")
    logger.setLevel(level)

    # Dash reloads re-run this; avoid duplicate handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized (level=%s, file=%s)",
                 logging.getLevelName(level), log_file)
    return logger
