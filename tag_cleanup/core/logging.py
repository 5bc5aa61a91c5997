"""
Configuracion de loguru para la corrida de la migracion.
"""
import sys

from loguru import logger


LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def configure_logging(level: str = "INFO", log_file: str = "") -> None:
    """
    Reemplaza el sink por defecto de loguru.

    Args:
        level: Nivel minimo (DEBUG, INFO, WARNING, ...)
        log_file: Ruta opcional de archivo; vacio = solo stderr
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_file:
        logger.add(
            log_file,
            rotation="50 MB",
            retention="10 days",
            level=level.upper()
        )
