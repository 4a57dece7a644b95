from __future__ import annotations

import logging
from dataclasses import dataclass

from dealer_desk.domain.lease import LeaseQuote, LeaseQuoteInput, quote_lease

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QuoteLease:
    """
    Single-term lease quote.

    Pure computation: nothing is stored. Saving a quote is the caller's
    decision.
    """

    def execute(self, lease: LeaseQuoteInput) -> LeaseQuote:
        quote = quote_lease(lease)
        logger.debug(
            "Lease quoted",
            extra={"term": quote.term, "monthly_payment": str(quote.monthly_payment)},
        )
        return quote
