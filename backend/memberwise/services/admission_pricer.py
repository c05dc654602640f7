"""Admission pricer - regular pay-per-visit cost, the baseline every membership is compared to."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from memberwise.data.catalog import PricingCatalog, Venue, VenuePricing, default_catalog
from memberwise.data.currency import ZERO, format_currency
from memberwise.schemas.recommendation import CostBreakdownItem
from memberwise.schemas.visit_plan import VisitPlan

logger = logging.getLogger(__name__)


@dataclass
class VenueAdmission:
    """Regular admission at one venue across all planned visits."""
    venue: Venue
    venue_name: str
    visits: int
    adults: int
    paying_children: int
    adult_price: Decimal
    child_price: Decimal
    per_visit_cost: Decimal
    total: Decimal

    def to_item(self) -> CostBreakdownItem:
        return CostBreakdownItem(
            label=f"Admission at {self.venue_name}",
            amount=self.total,
            details=(
                f"{self.visits} visits × ({self.adults} adults × {format_currency(self.adult_price)}"
                f" + {self.paying_children} children × {format_currency(self.child_price)})"
            ),
        )

    def to_dict(self) -> dict:
        return {
            "venue": self.venue.value,
            "visits": self.visits,
            "adults": self.adults,
            "paying_children": self.paying_children,
            "per_visit_cost": str(self.per_visit_cost),
            "total": str(self.total),
        }


@dataclass
class AdmissionBreakdown:
    """Baseline cost split by venue plus parking."""
    venues: list[VenueAdmission] = field(default_factory=list)
    parking_visits: int = 0
    parking_rate: Decimal = ZERO
    parking_cost: Decimal = ZERO
    total_visits: int = 0

    @property
    def admission_cost(self) -> Decimal:
        return sum((v.total for v in self.venues), ZERO)

    @property
    def total(self) -> Decimal:
        return self.admission_cost + self.parking_cost

    def items(self) -> list[CostBreakdownItem]:
        items = [v.to_item() for v in self.venues]
        if self.parking_cost > 0:
            items.append(CostBreakdownItem(
                label="Parking",
                amount=self.parking_cost,
                details=f"{self.parking_visits} visits × {format_currency(self.parking_rate)}",
            ))
        return items

    def to_dict(self) -> dict:
        return {
            "venues": [v.to_dict() for v in self.venues],
            "parking_visits": self.parking_visits,
            "parking_cost": str(self.parking_cost),
            "admission_cost": str(self.admission_cost),
            "total": str(self.total),
            "total_visits": self.total_visits,
            "items": [item.model_dump(mode="json") for item in self.items()],
        }


class AdmissionPricer:
    """Prices regular (non-member) admission for a visit plan."""

    def __init__(self, catalog: PricingCatalog = default_catalog):
        self.catalog = catalog

    @property
    def constraints(self):
        return self.catalog.constraints

    def cap_visits(self, visits: int) -> int:
        return min(max(0, visits), self.constraints.MAX_VISITS_PER_LOCATION)

    def count_eligible_children(self, child_ages, pricing: VenuePricing) -> int:
        """Children who pay admission at ``pricing``'s venue."""
        return sum(1 for age in child_ages if not pricing.is_free_for_age(age))

    def count_member_children(self, child_ages) -> int:
        """Children old enough to count toward family size."""
        return sum(1 for age in child_ages if age >= self.catalog.child_counts_as_person_age)

    def family_size(self, plan: VisitPlan) -> int:
        """Adults plus children old enough to count as a member."""
        adults = max(0, plan.adult_count)
        children = self.count_member_children(plan.child_ages)
        return min(adults + children, self.constraints.max_family_size)

    def venue_prices(self, venue: VenuePricing, plan: VisitPlan) -> tuple[Decimal, Decimal]:
        prices = venue.admission(resident=plan.is_resident_discount_eligible)
        return prices.adult, prices.child

    def single_visit_cost(self, plan: VisitPlan, venue: Venue) -> Decimal:
        """Admission for the whole family for one visit to ``venue``."""
        pricing = self.catalog.venue(venue)
        adult_price, child_price = self.venue_prices(pricing, plan)
        children = self.count_eligible_children(plan.child_ages, pricing)
        return max(0, plan.adult_count) * adult_price + children * child_price

    def venue_admission(self, plan: VisitPlan, venue: Venue) -> VenueAdmission:
        pricing = self.catalog.venue(venue)
        adult_price, child_price = self.venue_prices(pricing, plan)
        visits = self.cap_visits(plan.visits(venue))
        adults = max(0, plan.adult_count)
        children = self.count_eligible_children(plan.child_ages, pricing)
        per_visit = self.single_visit_cost(plan, venue)
        return VenueAdmission(
            venue=venue,
            venue_name=pricing.name,
            visits=visits,
            adults=adults,
            paying_children=children,
            adult_price=adult_price,
            child_price=child_price,
            per_visit_cost=per_visit,
            total=visits * per_visit,
        )

    def parking_visits(self, plan: VisitPlan) -> int:
        return sum(self.cap_visits(plan.visits(v)) for v in self.catalog.parking_venues)

    def parking_cost(self, visits: int, rate: Decimal) -> Decimal:
        """``visits`` must already be capped per venue (see ``parking_visits``)."""
        if visits <= 0:
            return ZERO
        return visits * rate

    def count_total_visits(self, plan: VisitPlan) -> int:
        """Per-venue capped visits, summed, then capped at the overall maximum."""
        capped = sum(self.cap_visits(plan.visits(v)) for v in self.catalog.venues)
        return min(self.constraints.MAX_TOTAL_VISITS, capped)

    def determine_primary_venue(self, plan: VisitPlan) -> Venue:
        """Venue with the most visits. Ties go to the default venue, then catalog order."""
        default = self.catalog.default_primary_venue
        ordered = [default] + [v for v in self.catalog.venues if v != default]
        best = ordered[0]
        best_visits = self.cap_visits(plan.visits(best))
        for venue in ordered[1:]:
            visits = self.cap_visits(plan.visits(venue))
            if visits > best_visits:
                best, best_visits = venue, visits
        return best

    def regular_admission_breakdown(self, plan: VisitPlan) -> AdmissionBreakdown:
        breakdown = AdmissionBreakdown(total_visits=self.count_total_visits(plan))
        for venue in self.catalog.venues:
            if self.cap_visits(plan.visits(venue)) > 0:
                breakdown.venues.append(self.venue_admission(plan, venue))

        if plan.include_parking:
            breakdown.parking_visits = self.parking_visits(plan)
            breakdown.parking_rate = self.catalog.parking.standard
            breakdown.parking_cost = self.parking_cost(breakdown.parking_visits, breakdown.parking_rate)

        logger.debug(
            "Regular admission: "
            + ", ".join(f"{v.venue.value}={v.total}" for v in breakdown.venues)
            + f", parking={breakdown.parking_cost}, total={breakdown.total}"
        )
        return breakdown

    def compute_regular_admission_cost(self, plan: VisitPlan) -> Decimal:
        """Total à-la-carte cost for the plan, including standard-rate parking.

        Visits are capped per venue before multiplying; the overall visit cap
        only applies to reported totals, not to this sum.
        """
        return self.regular_admission_breakdown(plan).total


admission_pricer = AdmissionPricer()
