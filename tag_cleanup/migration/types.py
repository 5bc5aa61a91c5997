"""
Tipos puros para el pipeline de limpieza.

Se mantienen libres de I/O para poder testearlos facilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class BulkRecord:
    id: int
    archive_file: Optional[str]


@dataclass(frozen=True)
class PartnerRecord:
    partner_id: int
    meta: Optional[str]


@dataclass(frozen=True)
class ClientRecord:
    client_id: int
    client_contract_attachment_url: Optional[str]
    client_tax_attachment: Optional[str]
    client_pks_attachment: Optional[str]


class RowOutcome(str, Enum):
    UPDATED = "updated"
    WOULD_UPDATE = "would_update"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RowResult:
    """
    Resultado explicito del procesamiento de una fila.

    - reason: motivo de skip (informativo)
    - error: causa del fallo cuando outcome == FAILED
    """

    outcome: RowOutcome
    row_id: int
    reason: Optional[str] = None
    error: Optional[Exception] = None

    @classmethod
    def updated(cls, row_id: int) -> "RowResult":
        return cls(RowOutcome.UPDATED, row_id)

    @classmethod
    def would_update(cls, row_id: int) -> "RowResult":
        return cls(RowOutcome.WOULD_UPDATE, row_id)

    @classmethod
    def skipped(cls, row_id: int, reason: str) -> "RowResult":
        return cls(RowOutcome.SKIPPED, row_id, reason=reason)

    @classmethod
    def failed(cls, row_id: int, error: Exception) -> "RowResult":
        return cls(RowOutcome.FAILED, row_id, error=error)


@dataclass
class MigrationSummary:
    """Contadores de una tabla para una corrida."""

    table: str
    seen: int = 0
    updated: int = 0
    would_update: int = 0
    skipped: int = 0
    failed: int = 0
    batches: int = 0

    def record(self, result: RowResult) -> None:
        self.seen += 1
        if result.outcome is RowOutcome.UPDATED:
            self.updated += 1
        elif result.outcome is RowOutcome.WOULD_UPDATE:
            self.would_update += 1
        elif result.outcome is RowOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


@dataclass
class RunReport:
    """Agregado de los resumenes de todas las tablas procesadas."""

    dry_run: bool
    summaries: list[MigrationSummary] = field(default_factory=list)

    @property
    def total_seen(self) -> int:
        return sum(s.seen for s in self.summaries)

    @property
    def total_updated(self) -> int:
        return sum(s.updated for s in self.summaries)

    @property
    def total_would_update(self) -> int:
        return sum(s.would_update for s in self.summaries)

    @property
    def total_skipped(self) -> int:
        return sum(s.skipped for s in self.summaries)

    @property
    def total_failed(self) -> int:
        return sum(s.failed for s in self.summaries)
