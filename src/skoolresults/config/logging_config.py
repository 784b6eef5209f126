import logging
from typing import Optional

from skoolresults.config.settings import settings


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    level_name = (level or settings.log_level).upper()
    numeric = logging.getLevelName(level_name)
    if not isinstance(numeric, int):
        logging.warning("Unknown log level %s, falling back to INFO", level_name)
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
