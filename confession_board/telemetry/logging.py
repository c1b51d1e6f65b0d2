"""
Configuración de logging estructurado.
- Nivel INFO por defecto (LOG_LEVEL); DEBUG en desarrollo.
- Formato con timestamps y nombre del logger.
- Integra con Uvicorn (hereda handlers) para no duplicar.
- httpx registra cada llamada a GitHub en INFO: se baja a WARNING salvo en DEBUG.
"""
import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str | None = None) -> None:
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    for uv_logger in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(uv_logger).setLevel(log_level)
    http_level = logging.DEBUG if log_level == "DEBUG" else logging.WARNING
    for lib_logger in ("httpx", "httpcore"):
        logging.getLogger(lib_logger).setLevel(http_level)
