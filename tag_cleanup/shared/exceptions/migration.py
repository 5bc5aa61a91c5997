"""
Excepciones del pipeline de limpieza.

Fatales (abortan el proceso): ConfigurationError, DatabaseConnectionError,
BatchFetchError. RowUpdateError nunca sale de un migrador: queda como causa
de un RowResult fallido.
"""
from typing import Any

from tag_cleanup.shared.exceptions.base import TagCleanupError


class ConfigurationError(TagCleanupError):
    """Falta configuracion obligatoria o es invalida."""

    def __init__(self, message: str, key: str = None):
        details = {"key": key} if key else None
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details
        )


class DatabaseConnectionError(TagCleanupError):
    """No se pudo abrir o verificar la conexion a la base de datos."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="DATABASE_CONNECTION_ERROR"
        )


class BatchFetchError(TagCleanupError):
    """Fallo la consulta de una pagina; termina el migrador y la corrida."""

    def __init__(self, table: str, cursor: int, cause: str):
        super().__init__(
            message=f"fetch {table} batch (cursor={cursor}): {cause}",
            error_code="BATCH_FETCH_ERROR",
            details={"table": table, "cursor": cursor}
        )


class RowUpdateError(TagCleanupError):
    """Fallo la escritura de una fila individual."""

    def __init__(self, table: str, row_id: Any, cause: str):
        super().__init__(
            message=f"update {table} id={row_id}: {cause}",
            error_code="ROW_UPDATE_ERROR",
            details={"table": table, "id": row_id}
        )
