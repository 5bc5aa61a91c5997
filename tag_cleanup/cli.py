"""
CLI: remover `tag`/`tagging` de URLs persistidas (one-shot, idempotente).

Variables de entorno (o `.env` en el cwd):
  - DB_DSN (obligatoria)
  - DRY_RUN, BATCH_SIZE, HYDRA_SIGN_PREFIX, BULK_S3_PREFIX
  - LOG_LEVEL, LOG_FILE

Ejecucion:
  remove-tagging
  remove-tagging --dry-run
  remove-tagging --only client --batch-size 500
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger

from tag_cleanup.core.config import Settings, resolve_batch_size
from tag_cleanup.core.logging import configure_logging
from tag_cleanup.migration.orchestrator import MIGRATORS, build_from_settings
from tag_cleanup.shared.exceptions import TagCleanupError


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="remove-tagging")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Solo loguea los cambios (no escribe). Equivale a DRY_RUN=1.",
    )
    parser.add_argument(
        "--batch-size",
        default=None,
        help="Tamano de pagina. Invalido o <= 0 usa el default (200).",
    )
    parser.add_argument(
        "--only",
        action="append",
        choices=list(MIGRATORS),
        help="Procesa solo la tabla indicada (repetible). Default: todas, en orden.",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Archivo .env a cargar antes de leer el entorno.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)

    # Un .env ausente no es error; no pisa variables ya exportadas.
    load_dotenv(Path(args.env_file), override=False)

    # Solo el archivo indicado por --env-file
    settings = Settings(_env_file=args.env_file)
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    batch_size = None
    if args.batch_size is not None:
        batch_size = resolve_batch_size(args.batch_size, default=settings.BATCH_SIZE, key="--batch-size")

    try:
        migration, engine = build_from_settings(
            settings,
            dry_run=args.dry_run,
            batch_size=batch_size,
            tables=args.only,
        )
    except TagCleanupError as e:
        logger.error(f"[FATAL] {e.error_code}: {e.message}")
        return 1

    try:
        migration.run()
    except TagCleanupError as e:
        logger.error(f"[FATAL] {e.error_code}: {e.message}")
        return 1
    finally:
        engine.dispose()

    return 0
