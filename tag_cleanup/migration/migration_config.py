"""
Configuracion inmutable de una corrida.

Se construye una sola vez (ver core.config.Settings.to_migration_config) y
se pasa explicitamente a cada migrador. Este modulo no realiza I/O.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MigrationConfig:
    """
    - dry_run: loguea los cambios en vez de escribirlos
    - batch_size: tamano de pagina del keyset
    - sign_prefix: prefijo de URLs firmadas (filtro de seguridad en client)
    - storage_prefix: prefijo S3 canonico para bulk.archive_file
    """

    dry_run: bool
    batch_size: int
    sign_prefix: str
    storage_prefix: str
    bulk_archive_type: str = "custom_client_rate"
    bulk_created_within_months: int = 1

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"batch_size debe ser positivo: {self.batch_size}")
