from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timezone

from dealer_desk.domain.clock import Clock, utcnow
from dealer_desk.domain.deal import Deal
from dealer_desk.domain.errors import ConflictError, NotFoundError, StaleDealError
from dealer_desk.ports.deal_repository import DealRepository

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class InMemoryDealRepository(DealRepository):
    """
    Canonical contract implementation for tests and local runs.

    - Stores deals by id, stamping created_at/updated_at like the database does
    - save() checks and bumps the version under the lock, so of two writers
      that loaded the same version only the first one lands
    - search() returns newest first (insertion order reversed on ties)
    - Guarded by a lock since sync FastAPI routes run in a thread pool
    """

    def __init__(
        self,
        deals: list[Deal] | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._deals: dict[str, Deal] = {deal.id: deal for deal in deals or []}
        self._clock = clock
        self._lock = threading.Lock()

    def add(self, deal: Deal) -> Deal:
        with self._lock:
            if deal.id in self._deals:
                raise ConflictError(f"Deal '{deal.id}' already exists", deal_id=deal.id)
            now = self._clock()
            stored = replace(deal, created_at=deal.created_at or now, updated_at=now, version=1)
            self._deals[deal.id] = stored
            return stored

    def save(self, deal: Deal) -> Deal:
        with self._lock:
            existing = self._deals.get(deal.id)
            if existing is None:
                raise NotFoundError(resource="Deal", identifier=deal.id)
            if existing.version != deal.version:
                raise StaleDealError(deal.id, expected=deal.version, current=existing.version)
            stored = replace(
                deal,
                created_at=existing.created_at,
                updated_at=self._clock(),
                version=existing.version + 1,
            )
            self._deals[deal.id] = stored
            return stored

    def get_by_id(self, deal_id: str) -> Deal | None:
        with self._lock:
            return self._deals.get(deal_id)

    def search(self, salesperson_id: str | None = None) -> list[Deal]:
        with self._lock:
            deals = list(self._deals.values())

        if salesperson_id is not None:
            deals = [deal for deal in deals if deal.salesperson_id == salesperson_id]

        # reversed first so the stable sort keeps later inserts ahead on equal timestamps
        deals.reverse()
        return sorted(deals, key=lambda d: d.created_at or _EPOCH, reverse=True)
