# bizdocs/core/logging_config.py

import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records to loguru."""

    def emit(self, record):
        level = record.levelname
        try:
            level = logger.level(level).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(level: str = "INFO") -> None:
    """
    Configure loguru as the main logger with colored, structured logs.
    Also redirect stdlib logging (the bizdocs modules, reportlab, PIL) to loguru.
    """
    level_name = (level or "INFO").upper()
    try:
        level_no = logger.level(level_name).no
    except ValueError:
        level_name, level_no = "INFO", logging.INFO
        unknown_level = level
    else:
        unknown_level = None

    # Remove default loguru handler
    logger.remove()

    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
        "<level>{message}</level>",
        level=level_name,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=level_no, force=True)
    # Quieten noisy libraries
    logging.getLogger("reportlab").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    if unknown_level is not None:
        logger.warning("Unknown log level {!r}; using INFO", unknown_level)
