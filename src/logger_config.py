import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src import paths

LOGGER_NAME = "weathermap"
LOG_FILE_NAME = "weathermap.log"
LOG_MAX_BYTES = 5_000_000  # 5 MB
LOG_BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_dir: str | None = None, level: int = logging.INFO) -> logging.Logger:
    """Console + rotating file logging for the "weathermap" logger.

    Streamlit re-executes main.py on every rerun, so handlers are only
    attached the first time.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    if log_dir is None:
        paths.ensure_dirs()
        target = paths.LOGS
    else:
        target = Path(log_dir)
        target.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [
        logging.StreamHandler(),
        RotatingFileHandler(
            target / LOG_FILE_NAME, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        ),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
