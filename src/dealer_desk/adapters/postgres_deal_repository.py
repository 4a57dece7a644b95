"""PostgreSQL implementation of DealRepository."""

from __future__ import annotations

from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from dealer_desk.domain.appraisal import Appraisal, Deduction
from dealer_desk.domain.deal import Deal, DealStructure, Stipulations
from dealer_desk.domain.errors import NotFoundError, StaleDealError
from dealer_desk.domain.lifecycle import DealStatus
from dealer_desk.infra.db.models.deal import DealRow
from dealer_desk.ports.deal_repository import DealRepository


class PostgresDealRepository(DealRepository):
    """
    PostgreSQL implementation of DealRepository.

    - Uses SQLAlchemy ORM for database access
    - Writes inputs and derived figures as computed; never recomputes
    - Converts DealRow (infrastructure) to Deal (domain) and back
    - save() is a compare-and-set on DealRow.version, so a stale copy never
      overwrites a newer one
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, deal: Deal) -> Deal:
        row = DealRow(id=UUID(deal.id))
        self._apply(row, deal)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_domain(row)

    def save(self, deal: Deal) -> Deal:
        row = self._get_row(deal.id)
        if row is None:
            raise NotFoundError(resource="Deal", identifier=deal.id)
        if row.version != deal.version:
            raise StaleDealError(deal.id, expected=deal.version, current=row.version)
        self._apply(row, deal)
        try:
            self._session.flush()
        except StaleDataError as e:
            # Another transaction committed between our SELECT and UPDATE
            raise StaleDealError(deal.id, expected=deal.version) from e
        self._session.refresh(row)
        return self._to_domain(row)

    def get_by_id(self, deal_id: str) -> Deal | None:
        row = self._get_row(deal_id)
        return self._to_domain(row) if row else None

    def search(self, salesperson_id: str | None = None) -> list[Deal]:
        query = select(DealRow)
        if salesperson_id is not None:
            query = query.where(DealRow.salesperson_id == salesperson_id)
        query = query.order_by(DealRow.created_at.desc())

        rows = self._session.execute(query).scalars().all()
        return [self._to_domain(row) for row in rows]

    def _get_row(self, deal_id: str) -> DealRow | None:
        try:
            key = UUID(deal_id)
        except ValueError:  # Invalid UUID format
            return None
        query = select(DealRow).where(DealRow.id == key)
        return self._session.execute(query).scalar_one_or_none()

    @staticmethod
    def _apply(row: DealRow, deal: Deal) -> None:
        """Copy every persisted field of the aggregate onto the row."""
        structure = deal.structure
        row.customer_id = deal.customer_id
        row.vehicle_id = deal.vehicle_id
        row.salesperson_id = deal.salesperson_id
        row.lender_id = deal.lender_id
        row.status = deal.status.value
        row.notes = deal.notes

        row.sale_price = structure.sale_price
        row.down_payment = structure.down_payment
        row.trade_in_value = structure.trade_in_value
        row.term_months = structure.term_months
        row.apr = structure.apr
        row.principal = structure.principal
        row.monthly_payment = structure.monthly_payment
        row.total_of_payments = structure.total_of_payments
        row.finance_charge = structure.finance_charge

        appraisal = deal.appraisal
        if appraisal is None:
            row.appraisal_vin = None
            row.appraisal_base_value = None
            row.appraisal_deductions = None
            row.appraisal_final_acv = None
        else:
            row.appraisal_vin = appraisal.vin
            row.appraisal_base_value = appraisal.base_value
            row.appraisal_deductions = [
                {"label": d.label, "cost": str(d.cost)} for d in appraisal.deductions
            ]
            row.appraisal_final_acv = structure.final_acv

        stipulations = deal.stipulations
        row.id_verified = stipulations.id_verified
        row.video_sent = stipulations.video_sent
        row.insurance_proof = stipulations.insurance_proof
        row.credit_consent = stipulations.credit_consent

    @staticmethod
    def _to_appraisal(row: DealRow) -> Appraisal | None:
        if row.appraisal_base_value is None:
            return None
        deductions: list[dict[str, Any]] = row.appraisal_deductions or []
        return Appraisal(
            base_value=row.appraisal_base_value,
            deductions=tuple(
                Deduction(label=d.get("label", ""), cost=Decimal(str(d.get("cost", "0"))))
                for d in deductions
            ),
            vin=row.appraisal_vin,
        )

    def _to_domain(self, row: DealRow) -> Deal:
        """Convert DealRow to the Deal aggregate. NUMERIC columns already load as Decimal."""
        return Deal(
            id=str(row.id),
            customer_id=row.customer_id,
            vehicle_id=row.vehicle_id,
            salesperson_id=row.salesperson_id,
            lender_id=row.lender_id,
            structure=DealStructure(
                sale_price=row.sale_price,
                down_payment=row.down_payment,
                trade_in_value=row.trade_in_value,
                term_months=row.term_months,
                apr=row.apr,
                principal=row.principal,
                monthly_payment=row.monthly_payment,
                total_of_payments=row.total_of_payments,
                finance_charge=row.finance_charge,
                final_acv=row.appraisal_final_acv,
            ),
            appraisal=self._to_appraisal(row),
            stipulations=Stipulations(
                id_verified=row.id_verified,
                video_sent=row.video_sent,
                insurance_proof=row.insurance_proof,
                credit_consent=row.credit_consent,
            ),
            status=DealStatus(row.status),
            notes=row.notes,
            created_at=row.created_at,
            updated_at=row.updated_at,
            version=row.version,
        )
