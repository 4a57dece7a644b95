from dealer_desk.infra.db.models.base import Base
from dealer_desk.infra.db.models.deal import DealRow

__all__ = ["Base", "DealRow"]
