"""SQLite-backed candidate store.

Business records live in a ``businesses`` table, but every read goes
through the ``eligible_businesses`` view, which only exposes paid tiers
with a coordinate.  Queries add the tenant and minimum-rating constraints
on top.  Uses ``aiosqlite`` for async I/O.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import aiosqlite
import structlog
from pydantic import ValidationError

from atlas.interfaces.candidate_store import ICandidateStore
from atlas.models.business import BusinessCandidate, BusinessTier, Coordinate
from atlas.utils.errors import CandidateFetchError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/atlas.db")

# SQLite's default bind-variable limit is 999 on older builds.
_MAX_IDS_PER_QUERY = 500

# Escaped with a backslash in LIKE patterns.
_LIKE_SPECIALS = re.compile(r"[\\%_]")

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS businesses (
    business_id   TEXT PRIMARY KEY,
    tenant_id     TEXT NOT NULL,
    display_name  TEXT NOT NULL,
    rating        REAL,
    tier          TEXT NOT NULL DEFAULT 'unclaimed',
    lat           REAL,
    lng           REAL,
    updated_at    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_VIEW_SQL = """\
CREATE VIEW IF NOT EXISTS eligible_businesses AS
SELECT business_id, tenant_id, display_name, rating, tier, lat, lng
FROM businesses
WHERE tier IN ('featured', 'spotlight')
  AND lat IS NOT NULL
  AND lng IS NOT NULL;
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_businesses_tenant ON businesses(tenant_id);",
    "CREATE INDEX IF NOT EXISTS idx_businesses_tenant_tier ON businesses(tenant_id, tier);",
]

_UPSERT_SQL = """\
INSERT INTO businesses (business_id, tenant_id, display_name, rating, tier, lat, lng)
VALUES (?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(business_id)
DO UPDATE SET tenant_id    = excluded.tenant_id,
              display_name = excluded.display_name,
              rating       = excluded.rating,
              tier         = excluded.tier,
              lat          = excluded.lat,
              lng          = excluded.lng,
              updated_at   = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_MAP_SQL = """\
SELECT business_id, display_name, rating, tier, lat, lng
FROM eligible_businesses
WHERE tenant_id = ?
  AND COALESCE(rating, 0) >= ?
  AND (? = '' OR display_name LIKE ? ESCAPE '\\')
ORDER BY CASE tier WHEN 'spotlight' THEN 0 ELSE 1 END, rating DESC, display_name
LIMIT ?;
"""


def _row_to_candidate(row: dict[str, Any]) -> BusinessCandidate:
    return BusinessCandidate(
        business_id=row["business_id"],
        display_name=row["display_name"],
        rating=row["rating"],
        tier=row["tier"],
        coordinate=Coordinate(lat=row["lat"], lng=row["lng"]),
    )


class SQLiteCandidateStore(ICandidateStore):
    """Eligibility-scoped business store on a local SQLite file."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the businesses table, indices and the eligibility view."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.execute(_CREATE_VIEW_SQL)
            await db.commit()
        logger.info("candidate_store_initialized", path=str(self._db_path))

    async def fetch(
        self,
        ids: list[str],
        tenant_id: str,
        min_rating: float,
    ) -> list[BusinessCandidate]:
        if not ids:
            return []

        unique_ids = list(dict.fromkeys(ids))
        rows_by_id: dict[str, dict[str, Any]] = {}
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                for start in range(0, len(unique_ids), _MAX_IDS_PER_QUERY):
                    chunk = unique_ids[start : start + _MAX_IDS_PER_QUERY]
                    placeholders = ",".join("?" for _ in chunk)
                    cursor = await db.execute(
                        "SELECT business_id, display_name, rating, tier, lat, lng "
                        "FROM eligible_businesses "
                        "WHERE tenant_id = ? AND COALESCE(rating, 0) >= ? "
                        f"AND business_id IN ({placeholders})",
                        (tenant_id, min_rating, *chunk),
                    )
                    for row in await cursor.fetchall():
                        rows_by_id[row["business_id"]] = dict(row)
        except aiosqlite.Error as exc:
            raise CandidateFetchError(
                message=f"SQLite candidate fetch failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        candidates: list[BusinessCandidate] = []
        for business_id in unique_ids:
            row = rows_by_id.get(business_id)
            if row is None:
                continue
            try:
                candidates.append(_row_to_candidate(row))
            except ValidationError:
                logger.warning("candidate_row_invalid", business_id=business_id)

        logger.info(
            "candidate_fetch",
            tenant_id=tenant_id,
            requested=len(unique_ids),
            returned=len(candidates),
        )
        return candidates

    async def list_for_map(
        self,
        tenant_id: str,
        min_rating: float,
        name_filter: str = "",
        limit: int = 50,
    ) -> list[BusinessCandidate]:
        name_filter = name_filter.strip()
        pattern = "%" + _LIKE_SPECIALS.sub(r"\\\g<0>", name_filter) + "%"
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    _SELECT_MAP_SQL,
                    (tenant_id, min_rating, name_filter, pattern, limit),
                )
                rows = [dict(r) for r in await cursor.fetchall()]
        except aiosqlite.Error as exc:
            raise CandidateFetchError(
                message=f"SQLite map listing failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        candidates: list[BusinessCandidate] = []
        for row in rows:
            try:
                candidates.append(_row_to_candidate(row))
            except ValidationError:
                logger.warning("candidate_row_invalid", business_id=row["business_id"])
        return candidates

    async def upsert_business(
        self,
        business_id: str,
        tenant_id: str,
        display_name: str,
        tier: BusinessTier | str,
        rating: float | None = None,
        lat: float | None = None,
        lng: float | None = None,
    ) -> None:
        """Insert or update one business row (any tier; the view does the filtering)."""
        tier_value = BusinessTier(tier).value
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(
                _UPSERT_SQL,
                (business_id, tenant_id, display_name, rating, tier_value, lat, lng),
            )
            await db.commit()
        logger.debug("business_upserted", business_id=business_id, tier=tier_value)

    async def count(self, tenant_id: str | None = None) -> int:
        async with aiosqlite.connect(str(self._db_path)) as db:
            if tenant_id:
                cursor = await db.execute(
                    "SELECT COUNT(*) FROM businesses WHERE tenant_id = ?", (tenant_id,)
                )
            else:
                cursor = await db.execute("SELECT COUNT(*) FROM businesses")
            row = await cursor.fetchone()
        return int(row[0]) if row else 0

    def get_provider_name(self) -> str:
        return "sqlite"
