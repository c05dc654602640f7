"""Shared fixtures for all tests.

Engines are built with a fixed clock so promotion windows never depend on
the day the suite runs.
"""

import os
from dataclasses import replace
from datetime import date
from decimal import Decimal

# Must be set before memberwise.config is imported anywhere.
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from memberwise.data.catalog import DiscountType, PricingCatalog, Venue
from memberwise.schemas.visit_plan import SpecialProgramFlags, VisitPlan
from memberwise.services.admission_pricer import AdmissionPricer
from memberwise.services.discount_engine import DiscountEngine
from memberwise.services.recommendation.engine import RecommendationEngine

OUTSIDE_PROMOTION = date(2026, 3, 1)
INSIDE_PROMOTION = date(2025, 3, 1)


def build_plan(
    adults: int = 2,
    children: tuple[int, ...] = (),
    science: int = 0,
    dpkh: int = 0,
    dpkr: int = 0,
    resident: bool = False,
    parking: bool = False,
    welcome: bool = False,
    discount: DiscountType = DiscountType.NONE,
) -> VisitPlan:
    return VisitPlan(
        adult_count=adults,
        child_ages=children,
        visits_by_venue={
            Venue.SCIENCE: science,
            Venue.KIDS_HUNTERSVILLE: dpkh,
            Venue.KIDS_ROCKINGHAM: dpkr,
        },
        is_resident_discount_eligible=resident,
        include_parking=parking,
        special_program_flags=SpecialProgramFlags(welcome_eligible=welcome, discount_type=discount),
    )


@pytest.fixture
def make_plan():
    return build_plan


@pytest.fixture
def catalog() -> PricingCatalog:
    return PricingCatalog()


@pytest.fixture
def promo_catalog(catalog) -> PricingCatalog:
    """Catalog with the spring promotion running at 20%."""
    return replace(catalog, promotion=replace(catalog.promotion, current_rate=Decimal("0.2")))


@pytest.fixture
def pricer(catalog) -> AdmissionPricer:
    return AdmissionPricer(catalog)


@pytest.fixture
def discounts(catalog, pricer) -> DiscountEngine:
    return DiscountEngine(catalog, pricer, today=lambda: OUTSIDE_PROMOTION)


@pytest.fixture
def engine(catalog) -> RecommendationEngine:
    return RecommendationEngine(catalog, today=lambda: OUTSIDE_PROMOTION)
