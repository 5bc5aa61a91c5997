"""
Migradores por tabla.

Cada migrador compone:
- paginacion por keyset (pagination.iter_pages)
- extraccion de los campos elegibles de la fila
- remove_tag_params (+ normalize_bulk_archive_url en bulk)
- escritura condicional (o log en dry-run)

Por fila se devuelve un RowResult explicito. Los fallos de escritura quedan
como FAILED y se continua con la siguiente fila; los fallos de fetch
(BatchFetchError) terminan el migrador.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Sequence, TypeVar

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from tag_cleanup.shared.exceptions import BatchFetchError, RowUpdateError

from . import table_queries as q
from .migration_config import MigrationConfig
from .pagination import iter_pages
from .repository import TagCleanupRepository
from .types import (
    BulkRecord,
    ClientRecord,
    MigrationSummary,
    PartnerRecord,
    RowOutcome,
    RowResult,
)
from .url_tools import normalize_bulk_archive_url, remove_tag_params

R = TypeVar("R")

PARTNER_ATTACH_FILES_KEY = "partner_pos_attach_files"


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


class TableMigrator(ABC, Generic[R]):
    """
    Loop comun: FETCH_PAGE -> PROCESS_ROW* -> ADVANCE_CURSOR -> ... -> DONE.
    """

    table: str
    label: str
    id_column: str
    description: str

    def __init__(self, repo: TagCleanupRepository, config: MigrationConfig) -> None:
        self._repo = repo
        self._config = config

    @abstractmethod
    def row_id(self, row: R) -> int:
        ...

    @abstractmethod
    def fetch(self, last_id: int, limit: int) -> Sequence[R]:
        ...

    @abstractmethod
    def process_row(self, row: R) -> RowResult:
        ...

    def run(self) -> MigrationSummary:
        logger.info(f"== {self.label}: start remove tagging in {self.description} ==")
        summary = MigrationSummary(table=self.table)
        last_id = 0

        for page in iter_pages(
            self._fetch_page,
            batch_size=self._config.batch_size,
            key=self.row_id,
            table=self.table,
        ):
            summary.batches += 1
            logger.info(
                f"[{self.label}] batch #{page.number}, size={len(page.rows)}, "
                f"{self.id_column} range {self.row_id(page.rows[0])}..{self.row_id(page.rows[-1])}"
            )

            for row in page.rows:
                last_id = self.row_id(row)
                result = self.process_row(row)
                summary.record(result)
                if result.outcome is RowOutcome.FAILED:
                    logger.error(f"[{self.label}][ERROR] {self.id_column}={last_id}: {result.error}")
                elif result.outcome is RowOutcome.SKIPPED:
                    logger.debug(f"[{self.label}] {self.id_column}={last_id} skipped: {result.reason}")

        logger.info(f"[{self.label}] no more rows after {self.id_column}={last_id}, stopping")
        logger.info(
            f"[{self.label}][SUMMARY] totalRows={summary.seen} totalUpdated={summary.updated} "
            f"totalWouldUpdate={summary.would_update} totalSkipped={summary.skipped} "
            f"totalFailed={summary.failed}"
        )
        return summary

    def _fetch_page(self, last_id: int, limit: int) -> Sequence[R]:
        try:
            return self.fetch(last_id, limit)
        except SQLAlchemyError as e:
            raise BatchFetchError(self.table, last_id, str(e)) from e

    def _write(self, row_id: int, write, *args: Any) -> Optional[RowResult]:
        """Ejecuta la escritura; retorna un RowResult FAILED si la base la rechaza."""
        try:
            write(*args)
        except SQLAlchemyError as e:
            return RowResult.failed(row_id, RowUpdateError(self.table, row_id, str(e)))
        return None


class BulkMigrator(TableMigrator[BulkRecord]):
    table = q.BULK_TABLE
    label = "BULK"
    id_column = "id"
    description = "archive_file"

    def row_id(self, row: BulkRecord) -> int:
        return row.id

    def fetch(self, last_id: int, limit: int) -> Sequence[BulkRecord]:
        return self._repo.fetch_bulk_batch(
            last_id,
            limit,
            archive_type=self._config.bulk_archive_type,
            created_within_months=self._config.bulk_created_within_months,
        )

    def process_row(self, row: BulkRecord) -> RowResult:
        raw = _clean(row.archive_file)
        if not raw:
            return RowResult.skipped(row.id, "empty archive_file")

        new_url, changed = remove_tag_params(raw)
        if not changed:
            return RowResult.skipped(row.id, "no tag params")

        new_url = normalize_bulk_archive_url(new_url, self._config.storage_prefix)

        if self._config.dry_run:
            logger.info(f"[BULK][DRY-RUN] id={row.id} archive_file\nold={raw}\nnew={new_url}")
            return RowResult.would_update(row.id)

        failed = self._write(row.id, self._repo.update_bulk_archive_file, row.id, new_url)
        if failed:
            return failed

        logger.info(f"[BULK][OK] id={row.id} updated archive_file\nold={raw}\nnew={new_url}")
        return RowResult.updated(row.id)


class PartnerMigrator(TableMigrator[PartnerRecord]):
    table = q.PARTNER_TABLE
    label = "PARTNER"
    id_column = "partner_id"
    description = f"meta.{PARTNER_ATTACH_FILES_KEY}"

    def row_id(self, row: PartnerRecord) -> int:
        return row.partner_id

    def fetch(self, last_id: int, limit: int) -> Sequence[PartnerRecord]:
        return self._repo.fetch_partner_batch(last_id, limit)

    def process_row(self, row: PartnerRecord) -> RowResult:
        raw_meta = _clean(row.meta)
        if not raw_meta:
            return RowResult.skipped(row.partner_id, "empty meta")

        try:
            meta = json.loads(raw_meta)
        except ValueError as e:
            logger.warning(f"[PARTNER][WARN] partner_id={row.partner_id} invalid JSON meta, skip: {e}")
            return RowResult.skipped(row.partner_id, "invalid JSON meta")

        if not isinstance(meta, dict):
            logger.warning(f"[PARTNER][WARN] partner_id={row.partner_id} meta is not a JSON object, skip")
            return RowResult.skipped(row.partner_id, "meta is not a JSON object")

        files = meta.get(PARTNER_ATTACH_FILES_KEY)
        if not isinstance(files, list) or not files:
            return RowResult.skipped(row.partner_id, f"no {PARTNER_ATTACH_FILES_KEY}")

        new_files, changed = clean_attach_files(files)
        if not changed:
            return RowResult.skipped(row.partner_id, "no tag params")

        # Mismo dict: el resto de las keys (y su orden) no se tocan.
        meta[PARTNER_ATTACH_FILES_KEY] = new_files
        try:
            new_meta = json.dumps(meta, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            return RowResult.failed(row.partner_id, RowUpdateError(self.table, row.partner_id, f"marshal updated meta: {e}"))

        if self._config.dry_run:
            logger.info(f"[PARTNER][DRY-RUN] partner_id={row.partner_id} meta\nold={raw_meta}\nnew={new_meta}")
            return RowResult.would_update(row.partner_id)

        failed = self._write(row.partner_id, self._repo.update_partner_meta, row.partner_id, new_meta)
        if failed:
            return failed

        logger.info(f"[PARTNER][OK] partner_id={row.partner_id} updated meta ({PARTNER_ATTACH_FILES_KEY} cleaned)")
        return RowResult.updated(row.partner_id)


def clean_attach_files(files: list) -> tuple[list, bool]:
    """
    Limpia cada string de la lista; los elementos que no son string pasan
    sin cambios y en la misma posicion.
    """
    changed = False
    new_files = []
    for item in files:
        if not isinstance(item, str):
            new_files.append(item)
            continue
        new_url, modified = remove_tag_params(item)
        changed = changed or modified
        new_files.append(new_url)
    return new_files, changed


class ClientMigrator(TableMigrator[ClientRecord]):
    table = q.CLIENT_TABLE
    label = "CLIENT"
    id_column = "client_id"
    description = "attachment URLs"

    def row_id(self, row: ClientRecord) -> int:
        return row.client_id

    def fetch(self, last_id: int, limit: int) -> Sequence[ClientRecord]:
        return self._repo.fetch_client_batch(last_id, limit, sign_prefix=self._config.sign_prefix)

    def pending_updates(self, row: ClientRecord) -> dict[str, str]:
        """Columnas cambiadas -> nuevo valor (solo URLs firmadas reconocidas)."""
        updates: dict[str, str] = {}
        for column in q.CLIENT_ATTACHMENT_COLUMNS:
            raw = _clean(getattr(row, column))
            if not raw:
                continue
            # Solo se tocan URLs de Hydra
            if not raw.startswith(self._config.sign_prefix):
                continue
            new_url, changed = remove_tag_params(raw)
            if changed:
                updates[column] = new_url
        return updates

    def process_row(self, row: ClientRecord) -> RowResult:
        updates = self.pending_updates(row)
        if not updates:
            return RowResult.skipped(row.client_id, "no eligible column changed")

        if self._config.dry_run:
            logger.info(f"[CLIENT][DRY-RUN] client_id={row.client_id} DB updates: {updates}")
            return RowResult.would_update(row.client_id)

        failed = self._write(row.client_id, self._repo.update_client_columns, row.client_id, updates)
        if failed:
            return failed

        logger.info(f"[CLIENT][OK] client_id={row.client_id} updated columns: {', '.join(updates)}")
        return RowResult.updated(row.client_id)
