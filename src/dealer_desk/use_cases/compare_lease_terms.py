from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from dealer_desk.domain.lease import LeaseComparison, LeaseQuoteInput, compare_terms

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CompareLeaseTermsRequest:
    lease: LeaseQuoteInput
    terms: Sequence[int]


@dataclass(frozen=True, slots=True)
class CompareLeaseTerms:
    """Side-by-side lease options (e.g. 24/36/48 months) for one vehicle."""

    def execute(self, request: CompareLeaseTermsRequest) -> LeaseComparison:
        comparison = compare_terms(request.lease, request.terms)
        logger.debug(
            "Lease terms compared",
            extra={
                "vehicle": comparison.vehicle_label,
                "terms": [option.term for option in comparison.options],
            },
        )
        return comparison
