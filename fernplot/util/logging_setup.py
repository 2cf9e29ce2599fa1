import logging
import logging.handlers
from typing import Optional

_LOGGER_NAME = "fernplot"

def get_logger(child: Optional[str] = None) -> logging.Logger:
    if child:
        return logging.getLogger(f"{_LOGGER_NAME}.{child}")
    return logging.getLogger(_LOGGER_NAME)

def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03dZ %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

def configure_root_logging(
    *,
    level: int = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = "fernplot.log",
    rotate_bytes: int = 5 * 1024 * 1024,
    rotate_count: int = 5,
) -> logging.Logger:
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    fmt = _build_formatter()
    if console:
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(fmt)
        logger.addHandler(ch)
    if log_file:
        fh = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
        )
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger

def shutdown_logging() -> None:
    logger = get_logger()
    for h in list(logger.handlers):
        try:
            h.flush()
        finally:
            logger.removeHandler(h)
            h.close()
