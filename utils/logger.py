import logging
import logging.config
from pathlib import Path
from typing import Optional

from config import Settings, get_settings


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Apply the dictConfig built from settings, creating the log directory when needed"""
    settings = settings or get_settings()
    if settings.LOG_TO_FILE:
        Path(settings.LOG_DIR).mkdir(exist_ok=True, parents=True)
    logging.config.dictConfig(settings.get_logging_config())
    return logging.getLogger("tracker")
