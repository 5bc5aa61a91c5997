"""
Consultas SQL por tabla (filtros de elegibilidad + UPDATEs).

Este es el punto para ajustar:
- que filas son visibles para la migracion
- que columnas se pueden escribir

Los filtros temporales se reciben como parametros (calculados en Python)
para que las mismas sentencias corran en MySQL y en SQLite (tests).
"""

from __future__ import annotations

BULK_TABLE = "bulk"
PARTNER_TABLE = "partner"
CLIENT_TABLE = "client"

# Unicas columnas de client que la migracion puede escribir.
CLIENT_ATTACHMENT_COLUMNS = (
    "client_contract_attachment_url",
    "client_tax_attachment",
    "client_pks_attachment",
)

LIKE_ESCAPE_CHAR = "!"

FETCH_BULK_BATCH = """
SELECT
    id,
    archive_file
FROM bulk
WHERE
    id > :last_id
    AND archive_type = :archive_type
    AND created_at >= :created_since
    AND archive_file IS NOT NULL
    AND archive_file != ''
ORDER BY id ASC
LIMIT :limit
"""

UPDATE_BULK_ARCHIVE_FILE = """
UPDATE bulk
SET archive_file = :archive_file
WHERE id = :id
"""

FETCH_PARTNER_BATCH = """
SELECT
    partner_id,
    meta
FROM partner
WHERE
    partner_id > :last_id
    AND partner_is_banned != 1
    AND partner_contract_end >= :now
ORDER BY partner_id ASC
LIMIT :limit
"""

UPDATE_PARTNER_META = """
UPDATE partner
SET meta = :meta
WHERE partner_id = :partner_id
"""

FETCH_CLIENT_BATCH = """
SELECT
    client_id,
    client_contract_attachment_url,
    client_tax_attachment,
    client_pks_attachment
FROM client
WHERE
    client_id > :last_id
    AND (
        client_contract_attachment_url LIKE :like_prefix ESCAPE '!' OR
        client_tax_attachment LIKE :like_prefix ESCAPE '!' OR
        client_pks_attachment LIKE :like_prefix ESCAPE '!'
    ) AND client_is_banned != 1 AND client_contract_end_date >= :now
ORDER BY client_id ASC
LIMIT :limit
"""


def like_prefix_pattern(prefix: str) -> str:
    """Patron LIKE 'prefix%' escapando los comodines del propio prefijo."""
    escaped = (
        prefix.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )
    return escaped + "%"


def build_client_update(columns: list[str]) -> str:
    """
    UPDATE de client afectando solo las columnas indicadas.
    Solo acepta columnas de CLIENT_ATTACHMENT_COLUMNS (se interpolan en el SQL).
    """
    if not columns:
        raise ValueError("build_client_update requiere al menos una columna")
    unknown = [c for c in columns if c not in CLIENT_ATTACHMENT_COLUMNS]
    if unknown:
        raise ValueError(f"Columnas no permitidas en client: {unknown}")
    set_sql = ", ".join(f"{c} = :{c}" for c in columns)
    return f"UPDATE client SET {set_sql} WHERE client_id = :client_id"
