import logging
import sys

from app.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_configured = False


def configure_logging(level: str = None, log_file: str = None) -> None:
    """Configura los handlers del logger raíz de la aplicación una sola vez"""
    global _configured

    if _configured:
        return

    app_logger = logging.getLogger('app')
    app_logger.setLevel(level or settings.LOG_LEVEL)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    app_logger.addHandler(stream_handler)

    log_file = settings.LOG_FILE if log_file is None else log_file
    if log_file:
        # Codificación UTF-8 para los mensajes con tildes
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        app_logger.addHandler(file_handler)

    _configured = True
