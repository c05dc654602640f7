"""Candidate builder - prices one membership product for a visit plan.

Fully-loaded annual cost = tier price (after any promotion) + member-rate
parking + guest-rate admission at venues the product does not cover.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal

from memberwise.data.catalog import (
    MembershipProduct,
    MembershipTier,
    PricingCatalog,
    Venue,
)
from memberwise.data.currency import ZERO, format_currency, format_rate
from memberwise.schemas.recommendation import CostBreakdownItem, ProductEvaluation
from memberwise.schemas.visit_plan import VisitPlan
from memberwise.services.admission_pricer import AdmissionPricer
from memberwise.services.discount_engine import DiscountEngine

logger = logging.getLogger(__name__)


@dataclass
class CrossLocationCharge:
    """What members pay as discounted guests at a venue their membership does not cover."""
    venue: Venue
    venue_name: str
    visits: int
    people: int
    full_cost: Decimal
    guest_saving: Decimal
    discount_rate: Decimal
    discounted_guests: int
    guest_cap: int

    @property
    def amount(self) -> Decimal:
        return self.full_cost - self.guest_saving

    def to_item(self) -> CostBreakdownItem:
        if self.discount_rate > 0:
            label = f"Guest admission at {self.venue_name} ({format_rate(self.discount_rate)} off)"
            details = (
                f"{self.visits} visits × {self.people} people, "
                f"{self.discounted_guests} discounted per visit (max {self.guest_cap})"
            )
        else:
            label = f"Admission at {self.venue_name}"
            details = f"{self.visits} visits × {self.people} people at full price"
        return CostBreakdownItem(label=label, amount=self.amount, details=details)


@dataclass
class MembershipCandidate:
    product: MembershipProduct
    label: str
    anchor_venue: Venue
    list_price: Decimal
    requested_family_size: int
    priced_family_size: int
    promotional_price: Decimal
    eligibility_discount: Decimal = ZERO
    parking_visits: int = 0
    parking_rate: Decimal = ZERO
    parking_cost: Decimal = ZERO
    cross_location: list[CrossLocationCharge] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    purchase_link: str = ""

    @property
    def promotional_discount(self) -> Decimal:
        return self.list_price - self.promotional_price

    @property
    def membership_price(self) -> Decimal:
        return max(ZERO, self.promotional_price - self.eligibility_discount)

    @property
    def applied_eligibility_discount(self) -> Decimal:
        """Portion of the eligibility discount that actually came off (price floors at 0)."""
        return self.promotional_price - self.membership_price

    @property
    def cross_location_cost(self) -> Decimal:
        return sum((c.amount for c in self.cross_location), ZERO)

    @property
    def additional_cost(self) -> Decimal:
        return self.parking_cost + self.cross_location_cost

    @property
    def total_cost(self) -> Decimal:
        return self.membership_price + self.additional_cost

    def with_eligibility_discount(self, amount: Decimal) -> "MembershipCandidate":
        return replace(self, eligibility_discount=amount)

    def to_evaluation(self) -> ProductEvaluation:
        return ProductEvaluation(
            product=self.product,
            label=self.label,
            eligible=True,
            reason="; ".join(self.notes) or None,
            priced_family_size=self.priced_family_size,
            base_price=self.membership_price,
            total_cost=self.total_cost,
            purchase_link=self.purchase_link,
        )

    def parking_item(self) -> CostBreakdownItem | None:
        if self.parking_cost <= 0:
            return None
        return CostBreakdownItem(
            label="Parking",
            amount=self.parking_cost,
            details=f"{self.parking_visits} visits × {format_currency(self.parking_rate)} member rate",
        )


def unavailable_reason(tier: MembershipTier, family_size: int) -> str:
    if tier.max_family_size is not None and family_size > tier.max_family_size:
        noun = "person" if tier.max_family_size == 1 else "people"
        return f"Only available for up to {tier.max_family_size} {noun}"
    if tier.min_family_size == 0:
        return "No price tiers configured"
    return f"Not available for a family of {family_size}"


class CandidateBuilder:
    """Builds a ``MembershipCandidate`` per tiered product."""

    def __init__(
        self,
        catalog: PricingCatalog,
        pricer: AdmissionPricer,
        discounts: DiscountEngine,
        today: Callable[[], date] = date.today,
    ):
        self.catalog = catalog
        self.pricer = pricer
        self.discounts = discounts
        self.today = today

    def cross_location_charges(self, plan: VisitPlan, tier: MembershipTier) -> list[CrossLocationCharge]:
        charges = []
        for venue in self.catalog.venues:
            if tier.covers(venue):
                continue
            admission = self.pricer.venue_admission(plan, venue)
            if admission.visits <= 0 or admission.total <= 0:
                continue
            guest = self.discounts.guest_discount_for_venue(plan, tier.product, venue)
            charges.append(CrossLocationCharge(
                venue=venue,
                venue_name=admission.venue_name,
                visits=admission.visits,
                people=admission.adults + admission.paying_children,
                full_cost=admission.total,
                guest_saving=guest.saving if guest else ZERO,
                discount_rate=guest.discount_rate if guest else ZERO,
                discounted_guests=guest.discounted_guests if guest else 0,
                guest_cap=guest.guest_cap if guest else 0,
            ))
        return charges

    def build(
        self,
        plan: VisitPlan,
        product: MembershipProduct,
        family_size: int,
    ) -> MembershipCandidate | None:
        """Price ``product``; None when the product cannot serve this family.

        Raises ``CatalogLookupError`` when the product has no price table.
        """
        tier = self.catalog.membership(product)
        tier_price = tier.price_for(family_size)
        if tier_price is None:
            return None

        notes = []
        if tier_price.is_fallback:
            notes.append(
                f"No {family_size}-person tier; priced as a "
                f"{tier_price.priced_family_size}-person membership"
            )

        promotional_price = self.discounts.apply_promotional_discount(
            tier_price.amount, family_size, tier.anchor_venue, product, on=self.today(),
        )
        if promotional_price < tier_price.amount:
            notes.append(f"Promotional discount applied ({format_rate(self.catalog.promotion.current_rate)} off)")

        candidate = MembershipCandidate(
            product=product,
            label=tier.label,
            anchor_venue=tier.anchor_venue,
            list_price=tier_price.amount,
            requested_family_size=family_size,
            priced_family_size=tier_price.priced_family_size,
            promotional_price=promotional_price,
            cross_location=self.cross_location_charges(plan, tier),
            notes=notes,
            purchase_link=tier.purchase_link,
        )
        if plan.include_parking:
            candidate.parking_visits = self.pricer.parking_visits(plan)
            candidate.parking_rate = self.catalog.parking.member
            candidate.parking_cost = self.pricer.parking_cost(candidate.parking_visits, candidate.parking_rate)

        logger.debug(
            f"  - {tier.label}: base {candidate.promotional_price}, "
            f"parking {candidate.parking_cost}, cross-location {candidate.cross_location_cost}, "
            f"total {candidate.total_cost}"
        )
        return candidate
