"""
Configuracion de fixtures para pytest.

Base SQLite en memoria (StaticPool: una sola conexion compartida) con las
tres tablas que toca la migracion.
"""
from datetime import datetime

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from tag_cleanup.migration.migration_config import MigrationConfig
from tag_cleanup.migration.repository import TagCleanupRepository


FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0)
SIGN_PREFIX = "https://api.dev-genesis.lionparcel.com/hydra/v1/asset/sign?"
STORAGE_PREFIX = "https://dev-genesis.s3.ap-southeast-1.amazonaws.com/"

SCHEMA = [
    """
    CREATE TABLE bulk (
        id INTEGER PRIMARY KEY,
        archive_type TEXT NOT NULL,
        archive_file TEXT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE partner (
        partner_id INTEGER PRIMARY KEY,
        meta TEXT NULL,
        partner_is_banned INTEGER NOT NULL DEFAULT 0,
        partner_contract_end TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE client (
        client_id INTEGER PRIMARY KEY,
        client_contract_attachment_url TEXT NULL,
        client_tax_attachment TEXT NULL,
        client_pks_attachment TEXT NULL,
        client_is_banned INTEGER NOT NULL DEFAULT 0,
        client_contract_end_date TEXT NOT NULL
    )
    """,
]


def create_schema(engine) -> None:
    with engine.begin() as conn:
        for ddl in SCHEMA:
            conn.execute(text(ddl))


@pytest.fixture
def engine():
    """Engine SQLite en memoria con el esquema creado."""
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def repo(engine):
    return TagCleanupRepository(engine, now=lambda: FIXED_NOW)


@pytest.fixture
def make_config():
    def _make(**overrides) -> MigrationConfig:
        values = {
            "dry_run": False,
            "batch_size": 2,
            "sign_prefix": SIGN_PREFIX,
            "storage_prefix": STORAGE_PREFIX,
        }
        values.update(overrides)
        return MigrationConfig(**values)

    return _make


def insert_rows(engine, table: str, rows: list[dict]) -> None:
    if not rows:
        return
    columns = list(rows[0].keys())
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({', '.join(':' + c for c in columns)})"
    with engine.begin() as conn:
        conn.execute(text(sql), rows)


def fetch_column(engine, table: str, id_column: str, column: str) -> dict:
    with engine.connect() as conn:
        rows = conn.execute(text(f"SELECT {id_column}, {column} FROM {table} ORDER BY {id_column}")).all()
    return {r[0]: r[1] for r in rows}
