#!/usr/bin/env python3
"""
Seed the deals table with deterministic random pencils.

Features:
- Deterministic: fixed seed → same dataset every run
- Idempotent: safe to run multiple times (clears before seeding)
- Consistent: every deal goes through StructureDeal and ChangeDealStatus,
  so payments and statuses are exactly what the API would produce

Usage:
    DATABASE_URL=postgresql+psycopg://... python scripts/seed_deals.py
"""

from __future__ import annotations

import random
import sys
import uuid
from decimal import Decimal
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dealer_desk.adapters.postgres_deal_repository import PostgresDealRepository
from dealer_desk.domain.appraisal import Appraisal, Deduction
from dealer_desk.domain.deal import DealInput, Stipulations
from dealer_desk.domain.lifecycle import DealStatus
from dealer_desk.infra.db.models.deal import DealRow
from dealer_desk.infra.db.session import get_session
from dealer_desk.use_cases.change_deal_status import ChangeDealStatus, ChangeDealStatusRequest
from dealer_desk.use_cases.structure_deal import StructureDeal, StructureDealRequest


# ==============================================================================
# Configuration
# ==============================================================================

RANDOM_SEED = 42  # Fixed seed for deterministic results
NUM_DEALS = 25

SALESPEOPLE = ["user-ana", "user-marco", "user-jess", "user-dev"]
TERMS = [36, 48, 60, 72, 84]
RECON_ITEMS = ["Tires", "Windshield", "Brakes", "Detail", "Bumper respray", "Key fob"]

# Where each seeded deal ends up; cancelled deals are cancelled from pending
STATUS_WALKS = {
    DealStatus.PENDING: [],
    DealStatus.PENDING_MANAGER: [DealStatus.PENDING_MANAGER],
    DealStatus.APPROVED: [DealStatus.PENDING_MANAGER, DealStatus.APPROVED],
    DealStatus.DELIVERED: [DealStatus.PENDING_MANAGER, DealStatus.APPROVED, DealStatus.DELIVERED],
    DealStatus.CANCELLED: [DealStatus.CANCELLED],
}


# ==============================================================================
# Pencil Generation
# ==============================================================================


def _round_to(value: int, step: int) -> Decimal:
    return Decimal(value // step * step)


def generate_appraisal(rng: random.Random) -> Appraisal:
    """A trade with one to three reconditioning deductions."""
    base_value = _round_to(rng.randint(2000, 18000), 250)
    deductions = tuple(
        Deduction(label=label, cost=_round_to(rng.randint(100, 1500), 50))
        for label in rng.sample(RECON_ITEMS, k=rng.randint(1, 3))
    )
    return Appraisal(base_value=base_value, deductions=deductions)


def generate_deal_input(rng: random.Random) -> DealInput:
    sale_price = _round_to(rng.randint(14000, 62000), 100)
    down_payment = _round_to(rng.randint(0, 6000), 500)
    apr = Decimal(rng.choice(["0", "2.9", "4.49", "5.99", "7.25", "9.9"]))

    appraisal = generate_appraisal(rng) if rng.random() < 0.4 else None

    return DealInput(
        sale_price=sale_price,
        down_payment=down_payment,
        term_months=rng.choice(TERMS),
        apr=apr,
        appraisal=appraisal,
    )


def generate_stipulations(rng: random.Random) -> Stipulations:
    return Stipulations(
        id_verified=rng.random() < 0.7,
        video_sent=rng.random() < 0.5,
        insurance_proof=rng.random() < 0.4,
        credit_consent=rng.random() < 0.6,
    )


# ==============================================================================
# Seeding
# ==============================================================================


def seed_deals(num_deals: int = NUM_DEALS, seed: int = RANDOM_SEED) -> None:
    """
    Seed the database with random deals.

    Args:
        num_deals: Number of deals to pencil
        seed: Random seed for deterministic results
    """
    rng = random.Random(seed)

    print(f"🌱 Seeding database with {num_deals} deals (seed={seed})...")

    with get_session() as session:
        print("🗑️  Clearing existing deals...")
        deleted_count = session.query(DealRow).delete()
        print(f"   Deleted {deleted_count} existing deals")

        repository = PostgresDealRepository(session)
        structure_deal = StructureDeal(
            deal_repository=repository,
            id_factory=lambda: str(uuid.UUID(int=rng.getrandbits(128), version=4)),
        )
        change_status = ChangeDealStatus(deal_repository=repository)

        print(f"✏️  Penciling {num_deals} deals...")
        deals = []
        for index in range(num_deals):
            salesperson_id = rng.choice(SALESPEOPLE)
            deal = structure_deal.execute(
                StructureDealRequest(
                    customer_id=f"cust-{1000 + index}",
                    vehicle_id=f"stock-{rng.randint(100, 999)}",
                    salesperson_id=salesperson_id,
                    deal_input=generate_deal_input(rng),
                    stipulations=generate_stipulations(rng),
                )
            )

            target = rng.choice(list(STATUS_WALKS))
            for status in STATUS_WALKS[target]:
                deal = change_status.execute(
                    ChangeDealStatusRequest(deal_id=deal.id, status=status, user_id=salesperson_id)
                )
            deals.append(deal)

        print(f"✅ Successfully seeded {len(deals)} deals!")

        print("\n📊 Sample deals:")
        for i, deal in enumerate(deals[:5], 1):
            structure = deal.structure
            print(
                f"   {i}. {deal.vehicle_id} - ${structure.monthly_payment:,.2f}/mo "
                f"x {structure.term_months} @ {structure.apr}% ({deal.status.value})"
            )

        if len(deals) > 5:
            print(f"   ... and {len(deals) - 5} more")


# ==============================================================================
# Main
# ==============================================================================


if __name__ == "__main__":
    try:
        seed_deals()
    except Exception as e:
        print(f"❌ Error seeding database: {e}", file=sys.stderr)
        sys.exit(1)
