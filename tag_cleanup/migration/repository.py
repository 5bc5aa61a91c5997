"""
Repositorio SQL (SQLAlchemy Core) para las tres tablas de la limpieza:
- lectura paginada por keyset (id > cursor, ASC, LIMIT)
- UPDATE de una fila por sentencia (cada una en su propia transaccion)

No decide nada de negocio: solo ejecuta las consultas de table_queries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Mapping

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from tag_cleanup.shared.exceptions import DatabaseConnectionError
from tag_cleanup.shared.utils.date_utils import subtract_months

from . import table_queries as q
from .types import BulkRecord, ClientRecord, PartnerRecord


class TagCleanupRepository:
    def __init__(self, engine: Engine, *, now: Callable[[], datetime] = datetime.now) -> None:
        self._engine = engine
        self._now = now

    def ping(self) -> None:
        """
        Verifica que la base sea alcanzable antes de empezar.
        """
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise DatabaseConnectionError(
                f"ping db: {e}\n"
                f"Sugerencia: verifica que DB_DSN sea accesible desde donde ejecutas el script "
                f"(host, puerto y credenciales)."
            ) from e

    # ------------------------------------------------------------------
    # BULK
    # ------------------------------------------------------------------

    def fetch_bulk_batch(
        self,
        last_id: int,
        limit: int,
        *,
        archive_type: str,
        created_within_months: int,
    ) -> list[BulkRecord]:
        stmt = text(q.FETCH_BULK_BATCH).bindparams(bindparam("created_since", type_=DateTime()))
        params = {
            "last_id": last_id,
            "limit": limit,
            "archive_type": archive_type,
            "created_since": subtract_months(self._now(), created_within_months),
        }
        with self._engine.connect() as conn:
            rows = conn.execute(stmt, params).mappings().all()
        return [BulkRecord(id=r["id"], archive_file=r["archive_file"]) for r in rows]

    def update_bulk_archive_file(self, row_id: int, archive_file: str) -> None:
        self._execute_update(q.UPDATE_BULK_ARCHIVE_FILE, {"archive_file": archive_file, "id": row_id})

    # ------------------------------------------------------------------
    # PARTNER
    # ------------------------------------------------------------------

    def fetch_partner_batch(self, last_id: int, limit: int) -> list[PartnerRecord]:
        stmt = text(q.FETCH_PARTNER_BATCH).bindparams(bindparam("now", type_=DateTime()))
        params = {"last_id": last_id, "limit": limit, "now": self._now()}
        with self._engine.connect() as conn:
            rows = conn.execute(stmt, params).mappings().all()
        return [PartnerRecord(partner_id=r["partner_id"], meta=r["meta"]) for r in rows]

    def update_partner_meta(self, partner_id: int, meta: str) -> None:
        self._execute_update(q.UPDATE_PARTNER_META, {"meta": meta, "partner_id": partner_id})

    # ------------------------------------------------------------------
    # CLIENT
    # ------------------------------------------------------------------

    def fetch_client_batch(self, last_id: int, limit: int, *, sign_prefix: str) -> list[ClientRecord]:
        stmt = text(q.FETCH_CLIENT_BATCH).bindparams(bindparam("now", type_=DateTime()))
        params = {
            "last_id": last_id,
            "limit": limit,
            "like_prefix": q.like_prefix_pattern(sign_prefix),
            "now": self._now(),
        }
        with self._engine.connect() as conn:
            rows = conn.execute(stmt, params).mappings().all()
        return [
            ClientRecord(
                client_id=r["client_id"],
                client_contract_attachment_url=r["client_contract_attachment_url"],
                client_tax_attachment=r["client_tax_attachment"],
                client_pks_attachment=r["client_pks_attachment"],
            )
            for r in rows
        ]

    def update_client_columns(self, client_id: int, updates: Mapping[str, str]) -> None:
        """
        Un solo UPDATE que toca exactamente las columnas de `updates`.
        """
        if not updates:
            return
        columns = [c for c in q.CLIENT_ATTACHMENT_COLUMNS if c in updates]
        sql = q.build_client_update(columns + [c for c in updates if c not in columns])
        params = dict(updates)
        params["client_id"] = client_id
        self._execute_update(sql, params)

    def _execute_update(self, sql: str, params: dict) -> None:
        # Una fila = una transaccion (commit al salir del bloque).
        with self._engine.begin() as conn:
            conn.execute(text(sql), params)
