from decimal import Decimal

import pytest

from dealer_desk.domain.errors import InvalidInputError
from dealer_desk.domain.lease import LeaseQuoteInput
from dealer_desk.use_cases.compare_lease_terms import CompareLeaseTerms, CompareLeaseTermsRequest
from dealer_desk.use_cases.quote_lease import QuoteLease


@pytest.fixture
def lease() -> LeaseQuoteInput:
    return LeaseQuoteInput(
        msrp=Decimal("35000"),
        cap_cost=Decimal("33000"),
        residual_percent=Decimal("55"),
        money_factor=Decimal("3.00"),
        term=36,
        down_payment=Decimal("2000"),
        sales_tax_rate=Decimal("7"),
    )


def test_quote_lease(lease: LeaseQuoteInput) -> None:
    quote = QuoteLease().execute(lease)

    assert quote.monthly_payment == Decimal("416")
    assert quote.total_interest == Decimal("2261")


def test_compare_lease_terms(lease: LeaseQuoteInput) -> None:
    comparison = CompareLeaseTerms().execute(CompareLeaseTermsRequest(lease=lease, terms=[24, 36]))

    assert comparison.vehicle_label == "Vehicle"
    assert [option.term for option in comparison.options] == [24, 36]


def test_compare_rejects_empty_terms(lease: LeaseQuoteInput) -> None:
    with pytest.raises(InvalidInputError, match="terms must be a non-empty list"):
        CompareLeaseTerms().execute(CompareLeaseTermsRequest(lease=lease, terms=[]))
