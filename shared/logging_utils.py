from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER_NAME = "trinity"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FALLBACK_LOG_FILE = Path(__file__).resolve().parent.parent / "logs" / "trinity.log"


def resolve_log_file(log_dir: str | None = None) -> Path:
    override_dir = log_dir or os.getenv("TRINITY_LOG_DIR")
    if override_dir:
        return Path(override_dir) / "trinity.log"
    return FALLBACK_LOG_FILE


def _rotating_handler(log_file: Path) -> RotatingFileHandler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        log_file,
        maxBytes=1_000_000,
        backupCount=5,
        encoding="utf-8",
    )


def configure_rotating_logger(
    logger_name: str = ROOT_LOGGER_NAME,
    preferred_log_file: Path | None = None,
    fallback_log_file: Path = FALLBACK_LOG_FILE,
    level: int = logging.INFO,
) -> tuple[logging.Logger, Path]:
    """Attach a rotating file handler and a console handler to the service logger.

    Child loggers (``trinity.cwl``, ``trinity.cocapi`` ...) propagate into it.
    Falls back to ``fallback_log_file`` when the preferred location is not writable.
    """
    preferred_log_file = preferred_log_file or resolve_log_file()
    logger = logging.getLogger(logger_name)
    if any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers):
        return logger, preferred_log_file

    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    effective_log_file = preferred_log_file
    try:
        file_handler = _rotating_handler(effective_log_file)
    except OSError:
        file_handler = _rotating_handler(fallback_log_file)
        effective_log_file = fallback_log_file

    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    logger.propagate = False
    return logger, effective_log_file
