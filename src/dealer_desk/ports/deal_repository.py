from __future__ import annotations

from abc import ABC, abstractmethod

from dealer_desk.domain.deal import Deal


class DealRepository(ABC):
    """
    Port for deal persistence.

    Implementations store raw pencil inputs next to the derived figures so
    a stored deal reads back exactly as it was computed.

    Contract (Preconditions):
        - deals are built and validated by the caller (UseCase)
        - implementations do not recompute structures
    """

    @abstractmethod
    def add(self, deal: Deal) -> Deal:
        """Persist a new deal and return it as stored."""
        ...

    @abstractmethod
    def save(self, deal: Deal) -> Deal:
        """
        Overwrite an existing deal and bump its version.

        Raises:
            NotFoundError: If no deal with deal.id exists
            StaleDealError: If the stored deal was saved again after this
                copy was loaded (deal.version no longer matches)
        """
        ...

    @abstractmethod
    def get_by_id(self, deal_id: str) -> Deal | None:
        ...

    @abstractmethod
    def search(self, salesperson_id: str | None = None) -> list[Deal]:
        """Deals newest first, optionally only those owned by one salesperson."""
        ...
