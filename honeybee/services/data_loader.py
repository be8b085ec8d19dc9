# HONEYBEE/backend/honeybee/services/data_loader.py : fetching the analytics inputs

"""
Fetch coordination for the dashboards.

- SingleFlight: at most one outstanding fetch per resource key; concurrent callers
  share the same task.
- LatestOnly: results are accepted by issuance order, so a slow response to an
  older request never overwrites the result of a newer one.
- DashboardLoader: fetches invoices, payments and products concurrently and
  aggregates them. A failed collection is reported as None and aggregated as empty.
- DashboardFeed: a consumer holding the latest snapshot; a failed refresh keeps the
  last good collection instead of blanking it.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, Hashable, List, Optional

from sqlalchemy.orm import sessionmaker

from honeybee.errors import HoneyBeeError
from honeybee.schemas.schemas import AnalyticsSnapshot
from honeybee.services.analytics_service import build_snapshot, resolve_time_range
from honeybee.store.record_store import RecordStore

logger = logging.getLogger(__name__)

RESOURCES = ("invoices", "payments", "products")

# Ordering used when fetching each analytics input
RESOURCE_ORDER = {
    "invoices": "-created_at",
    "payments": "-payment_date",
    "products": "name",
}

Fetcher = Callable[[str], List[Any]]


class SingleFlight:
    def __init__(self):
        self._inflight: Dict[Hashable, asyncio.Future] = {}

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[Any]]) -> Any:
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        # A cancelled caller must not cancel the shared fetch
        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: asyncio.Future) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight


class LatestOnly:
    def __init__(self):
        self._issued: Dict[Hashable, int] = {}

    def issue(self, consumer: Hashable) -> int:
        ticket = self._issued.get(consumer, 0) + 1
        self._issued[consumer] = ticket
        return ticket

    def is_current(self, consumer: Hashable, ticket: int) -> bool:
        return self._issued.get(consumer) == ticket

    async def run(self, consumer: Hashable, factory: Callable[[], Awaitable[Any]]) -> Optional[Any]:
        """Returns the result, or None when a newer request was issued meanwhile"""
        ticket = self.issue(consumer)
        result = await factory()
        if not self.is_current(consumer, ticket):
            logger.debug(f"Discarding stale result #{ticket} for {consumer!r}")
            return None
        return result


def record_fetcher(session_factory: sessionmaker, table: str) -> Fetcher:
    """Company-scoped fetch of one table, on its own session so fetches can run in parallel threads"""
    def fetch(company_id: str) -> List[Any]:
        db = session_factory()
        try:
            return RecordStore(db).find(table, {"company_id": company_id}, order_by=RESOURCE_ORDER.get(table))
        finally:
            db.close()
    return fetch


class DashboardLoader:
    def __init__(self, fetchers: Dict[str, Fetcher], single_flight: Optional[SingleFlight] = None):
        self.fetchers = fetchers
        self.single_flight = single_flight or SingleFlight()

    @classmethod
    def from_session_factory(cls, session_factory: sessionmaker, single_flight: Optional[SingleFlight] = None):
        fetchers = {table: record_fetcher(session_factory, table) for table in RESOURCES}
        return cls(fetchers, single_flight)

    async def fetch(self, resource: str, company_id: str) -> Optional[List[Any]]:
        """One collection, or None when it could not be fetched"""
        fetcher = self.fetchers.get(resource)
        if fetcher is None:
            return None
        try:
            return await self.single_flight.run(
                (resource, company_id),
                lambda: asyncio.to_thread(fetcher, company_id),
            )
        except HoneyBeeError as e:
            logger.warning(f"Fetching {resource} for company {company_id} failed: {e.message}")
            return None

    async def fetch_all(self, company_id: str) -> Dict[str, Optional[List[Any]]]:
        results = await asyncio.gather(*(self.fetch(resource, company_id) for resource in RESOURCES))
        return dict(zip(RESOURCES, results))

    async def load(self, company_id: str, time_range: Optional[str], reference_date: date) -> AnalyticsSnapshot:
        collections = await self.fetch_all(company_id)
        return build_snapshot(
            collections["invoices"] or [],
            collections["payments"] or [],
            collections["products"] or [],
            time_range,
            reference_date,
        )


class DashboardFeed:
    """Latest analytics for one company, refreshed on demand"""

    def __init__(self, loader: DashboardLoader, company_id: str):
        self.loader = loader
        self.company_id = company_id
        self.latest = LatestOnly()
        self.collections: Dict[str, List[Any]] = {}
        self.snapshot: Optional[AnalyticsSnapshot] = None

    async def refresh(self, time_range: Optional[str], reference_date: date) -> Optional[AnalyticsSnapshot]:
        """Returns the new snapshot, or None if a newer refresh superseded this one"""
        time_range = resolve_time_range(time_range)
        fetched = await self.latest.run(self.company_id, lambda: self.loader.fetch_all(self.company_id))
        if fetched is None:
            return None

        for resource, rows in fetched.items():
            if rows is not None:
                self.collections[resource] = rows

        self.snapshot = build_snapshot(
            self.collections.get("invoices", []),
            self.collections.get("payments", []),
            self.collections.get("products", []),
            time_range,
            reference_date,
        )
        return self.snapshot
