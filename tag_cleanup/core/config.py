"""
Configuracion central de la migracion.
Lee variables de entorno (y `.env` si existe) una sola vez al inicio y
construye el MigrationConfig inmutable que reciben los migradores.
"""
from typing import Any, Optional

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from tag_cleanup.migration.migration_config import MigrationConfig
from tag_cleanup.shared.exceptions import ConfigurationError


DEFAULT_BATCH_SIZE = 200
_TRUTHY = {"1", "true", "yes", "on", "y", "t"}


def resolve_batch_size(raw: Any, default: int = DEFAULT_BATCH_SIZE, key: str = "BATCH_SIZE") -> int:
    """
    Parsea el tamano de pagina.
    Valores vacios usan el default; invalidos o <= 0 usan el default con warning.
    """
    if raw is None:
        return default
    val = str(raw).strip()
    if val == "":
        return default
    try:
        n = int(val)
    except ValueError:
        n = 0
    if n <= 0:
        logger.warning(f"[WARN] invalid {key}={val!r}, using default={default}")
        return default
    return n


class Settings(BaseSettings):
    """
    Configuracion de la migracion.

    - DB_DSN es obligatoria (se valida en require_dsn, no al construir,
      para poder mostrar un error claro).
    - Los prefijos tienen defaults de desarrollo; en entornos reales se
      sobreescriben por variable de entorno.
    """

    # Base de datos
    DB_DSN: str = Field(default="")

    # Ejecucion
    DRY_RUN: bool = Field(default=False)
    BATCH_SIZE: int = Field(default=DEFAULT_BATCH_SIZE)

    # Prefijo de URLs firmadas por Hydra (attachments de client)
    HYDRA_SIGN_PREFIX: str = Field(
        default="https://api.dev-genesis.lionparcel.com/hydra/v1/asset/sign?"
    )

    # Prefijo S3 para bulk.archive_file
    # - dev: https://dev-genesis.s3.ap-southeast-1.amazonaws.com/
    # - prod: https://genesis.s3.ap-southeast-1.amazonaws.com/
    BULK_S3_PREFIX: str = Field(
        default="https://dev-genesis.s3.ap-southeast-1.amazonaws.com/"
    )
    BULK_ARCHIVE_TYPE: str = Field(default="custom_client_rate")
    BULK_CREATED_WITHIN_MONTHS: int = Field(default=1, ge=1)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="")

    @field_validator("DRY_RUN", mode="before")
    @classmethod
    def _parse_dry_run(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value or "").strip().lower() in _TRUTHY

    @field_validator("BATCH_SIZE", mode="before")
    @classmethod
    def _parse_batch_size(cls, value: Any) -> int:
        return resolve_batch_size(value)

    @field_validator("HYDRA_SIGN_PREFIX", "BULK_S3_PREFIX", mode="before")
    @classmethod
    def _fallback_empty_prefix(cls, value: Any, info) -> Any:
        # Variable definida pero vacia: mismo comportamiento que si no existiera.
        if value is None or str(value).strip() == "":
            return cls.model_fields[info.field_name].default
        return str(value).strip()

    def require_dsn(self) -> str:
        """Retorna DB_DSN o falla si no esta configurada."""
        if not self.DB_DSN.strip():
            raise ConfigurationError("DB_DSN env is required", key="DB_DSN")
        return self.DB_DSN.strip()

    def to_migration_config(
        self,
        *,
        dry_run: Optional[bool] = None,
        batch_size: Optional[int] = None,
    ) -> MigrationConfig:
        """
        Construye el MigrationConfig. Los overrides (flags de CLI) tienen
        prioridad sobre el entorno.
        """
        return MigrationConfig(
            dry_run=self.DRY_RUN if dry_run is None else dry_run,
            batch_size=self.BATCH_SIZE if batch_size is None else batch_size,
            sign_prefix=self.HYDRA_SIGN_PREFIX,
            storage_prefix=self.BULK_S3_PREFIX,
            bulk_archive_type=self.BULK_ARCHIVE_TYPE,
            bulk_created_within_months=self.BULK_CREATED_WITHIN_MONTHS,
        )

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env
