"""SQLite-backed per-tenant configuration.

One row per tenant in ``tenant_configs``.  A tenant without a row gets the
:class:`~atlas.models.query.TenantConfig` defaults from the caller.
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite
import structlog

from atlas.interfaces.tenant_config_provider import ITenantConfigProvider
from atlas.models.query import TenantConfig

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/atlas.db")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS tenant_configs (
    tenant_id    TEXT PRIMARY KEY,
    min_rating   REAL    NOT NULL,
    max_results  INTEGER NOT NULL,
    updated_at   TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_UPSERT_SQL = """\
INSERT INTO tenant_configs (tenant_id, min_rating, max_results)
VALUES (?, ?, ?)
ON CONFLICT(tenant_id)
DO UPDATE SET min_rating  = excluded.min_rating,
              max_results = excluded.max_results,
              updated_at  = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""


class SQLiteTenantConfigProvider(ITenantConfigProvider):
    """Tenant configuration stored alongside the business table."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the tenant_configs table if it doesn't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            await db.commit()
        logger.info("tenant_config_db_initialized", path=str(self._db_path))

    async def get(self, tenant_id: str) -> TenantConfig | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT min_rating, max_results FROM tenant_configs WHERE tenant_id = ?",
                (tenant_id,),
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return TenantConfig(min_rating=row["min_rating"], max_results=row["max_results"])

    async def upsert_tenant_config(self, tenant_id: str, config: TenantConfig) -> None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_UPSERT_SQL, (tenant_id, config.min_rating, config.max_results))
            await db.commit()
        logger.info(
            "tenant_config_upserted",
            tenant_id=tenant_id,
            min_rating=config.min_rating,
            max_results=config.max_results,
        )

    def get_provider_name(self) -> str:
        return "sqlite"
