"""Discount engine - guest discounts, promotions, Welcome Program and eligibility discounts.

Operations:
    compute_guest_admission_savings     savings when members bring companions,
                                        honoring per-visit headcount caps
    is_eligible_for_promotional_discount / apply_promotional_discount
                                        multi-person promotion (rate and
                                        eligibility are independent knobs)
    compute_welcome_program_pricing     means-tested flat-price membership
    compute_welcome_single_visit_pricing
    apply_eligibility_discount          educator / military flat discount
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from memberwise.data.catalog import (
    DiscountType,
    MembershipProduct,
    PricingCatalog,
    Venue,
    default_catalog,
)
from memberwise.data.currency import (
    ZERO,
    format_currency,
    format_rate,
    savings_percentage,
    to_cents,
    to_whole_dollars,
)
from memberwise.schemas.recommendation import (
    CostBreakdownItem,
    GuestSavingsItem,
    WelcomeOption,
    WelcomeSingleVisit,
)
from memberwise.schemas.visit_plan import VisitPlan
from memberwise.services.admission_pricer import AdmissionPricer

logger = logging.getLogger(__name__)

ELIGIBILITY_LABELS: dict[DiscountType, str] = {
    DiscountType.EDUCATOR: "Educator Discount",
    DiscountType.MILITARY: "Military Discount",
}


@dataclass
class GuestDiscountLine:
    """Guest-discount savings at one venue for one membership product."""
    venue: Venue
    venue_name: str
    visits: int
    is_home_venue: bool
    discount_rate: Decimal
    guest_cap: int
    total_guests: int
    discounted_adults: int
    discounted_children: int
    adult_price: Decimal
    child_price: Decimal

    @property
    def discounted_guests(self) -> int:
        return self.discounted_adults + self.discounted_children

    @property
    def adult_saving(self) -> Decimal:
        return self.visits * self.discounted_adults * (self.adult_price * self.discount_rate)

    @property
    def child_saving(self) -> Decimal:
        return self.visits * self.discounted_children * (self.child_price * self.discount_rate)

    @property
    def saving(self) -> Decimal:
        """Rounded once per venue so per-venue lines add up exactly."""
        return to_cents(self.adult_saving + self.child_saving)

    def to_item(self) -> GuestSavingsItem:
        return GuestSavingsItem(
            venue=self.venue,
            label=f"{self.venue_name} guest discounts ({format_rate(self.discount_rate)} off)",
            amount=self.saving,
            details=(
                f"{self.visits} visits × {self.discounted_guests} people "
                f"(max {self.guest_cap} discounted guests per visit)"
            ),
            discount_rate=self.discount_rate,
            guest_cap=self.guest_cap,
            discounted_adults=self.discounted_adults,
            discounted_children=self.discounted_children,
        )


@dataclass
class GuestSavings:
    total: Decimal = ZERO
    breakdown: list[GuestDiscountLine] = field(default_factory=list)

    def items(self) -> tuple[GuestSavingsItem, ...]:
        return tuple(line.to_item() for line in self.breakdown)


class DiscountEngine:
    """Discount and special-program rules over a pricing catalog."""

    def __init__(
        self,
        catalog: PricingCatalog = default_catalog,
        pricer: AdmissionPricer | None = None,
        today: Callable[[], date] = date.today,
        max_savings_percentage: int = 90,
    ):
        self.catalog = catalog
        self.pricer = pricer or AdmissionPricer(catalog)
        self.today = today
        self.max_savings_percentage = max_savings_percentage

    # ------------------------------------------------------------------ #
    #  Guest discounts                                                    #
    # ------------------------------------------------------------------ #

    def guest_discount_for_venue(
        self,
        plan: VisitPlan,
        product: MembershipProduct,
        venue: Venue,
    ) -> GuestDiscountLine | None:
        """Discounted-guest allocation at ``venue``; None when there are no visits.

        The cap goes to adults first, children get any remainder. Guests
        beyond the cap pay full price and save nothing.
        """
        visits = self.pricer.cap_visits(plan.visits(venue))
        if visits <= 0:
            return None

        tier = self.catalog.membership(product)
        pricing = self.catalog.venue(venue)
        adult_price, child_price = self.pricer.venue_prices(pricing, plan)
        adults = max(0, plan.adult_count)
        children = self.pricer.count_eligible_children(plan.child_ages, pricing)

        cap = self.catalog.guest_discount_cap(product, venue)
        total_guests = adults + children
        discounted = min(total_guests, cap)
        discounted_adults = min(adults, discounted)
        discounted_children = min(children, discounted - discounted_adults)

        return GuestDiscountLine(
            venue=venue,
            venue_name=pricing.name,
            visits=visits,
            is_home_venue=tier.covers(venue),
            discount_rate=tier.guest_discount_rate(venue),
            guest_cap=cap,
            total_guests=total_guests,
            discounted_adults=discounted_adults,
            discounted_children=discounted_children,
            adult_price=adult_price,
            child_price=child_price,
        )

    def compute_guest_admission_savings(
        self,
        plan: VisitPlan,
        product: MembershipProduct,
    ) -> GuestSavings:
        """Savings relative to full guest price, summed across visited venues.

        Only venues with a positive saving appear in the breakdown.
        """
        result = GuestSavings()
        for venue in self.catalog.venues:
            line = self.guest_discount_for_venue(plan, product, venue)
            if line is None or line.saving <= 0:
                continue
            result.breakdown.append(line)
            result.total += line.saving

        logger.debug(
            f"Guest savings for {product.value}: total={result.total}, "
            f"venues={[line.venue.value for line in result.breakdown]}"
        )
        return result

    # ------------------------------------------------------------------ #
    #  Promotional discount                                               #
    # ------------------------------------------------------------------ #

    def is_promotion_active(self, on: date | None = None) -> bool:
        return self.catalog.promotion.is_active(on or self.today())

    def is_eligible_for_promotional_discount(
        self,
        family_size: int,
        home_venue: Venue,
        product: MembershipProduct,
        on: date | None = None,
    ) -> bool:
        promo = self.catalog.promotion
        if family_size <= 0:
            return False
        if not self.is_promotion_active(on):
            return False
        if home_venue in promo.never_eligible_venues:
            return False
        if product not in promo.eligible_products:
            return False
        return family_size >= promo.minimum_members and home_venue in promo.eligible_venues

    def apply_promotional_discount(
        self,
        base_price: Decimal,
        family_size: int,
        home_venue: Venue,
        product: MembershipProduct,
        on: date | None = None,
    ) -> Decimal:
        """Discounted price rounded to whole dollars, or ``base_price`` unchanged.

        A zero rate leaves the price alone even while eligibility holds.
        """
        if base_price <= 0:
            return ZERO
        if not self.is_eligible_for_promotional_discount(family_size, home_venue, product, on):
            return base_price
        rate = self.catalog.promotion.current_rate
        return to_whole_dollars(base_price * (1 - rate))

    def eligibility_message(
        self,
        family_size: int,
        home_venue: Venue,
        product: MembershipProduct,
        on: date | None = None,
    ) -> str:
        promo = self.catalog.promotion
        if not self.is_eligible_for_promotional_discount(family_size, home_venue, product, on):
            if family_size < promo.minimum_members:
                return f"Not eligible for discount: requires {promo.minimum_members} or more people."
            if home_venue in promo.never_eligible_venues:
                venue_name = self.catalog.venue(home_venue).name
                return f"Not eligible for discount: {venue_name} memberships do not qualify for the promotional discount."
            if not self.is_promotion_active(on):
                return "No promotional discount is currently offered."
            return "Not eligible for current discount."

        tier = self.catalog.membership(product)
        tiers = []
        for venue in self.catalog.venues:
            rate = tier.guest_discount_rate(venue)
            cap = self.catalog.guest_discount_cap(product, venue)
            tiers.append(f"{format_rate(rate)} off for up to {cap} guests at {self.catalog.venue(venue).name}")
        return (
            f"Eligible for {format_rate(promo.current_rate)} membership discount! "
            f"Guest admission benefits: {', '.join(tiers)}."
        )

    def promotion_banner(self, on: date | None = None) -> dict | None:
        promo = self.catalog.promotion
        if not self.is_promotion_active(on) or not promo.banner_title:
            return None
        return {
            "title": promo.banner_title,
            "description": promo.banner_description,
            "rate": str(promo.current_rate),
            "start_date": promo.start_date.isoformat(),
            "end_date": promo.end_date.isoformat(),
        }

    # ------------------------------------------------------------------ #
    #  Welcome Program                                                    #
    # ------------------------------------------------------------------ #

    def welcome_label(self, venue: Venue) -> str:
        return f"{self.catalog.label_for(MembershipProduct.WELCOME)} Membership ({self.catalog.venue(venue).name})"

    def compute_welcome_program_pricing(
        self,
        plan: VisitPlan,
        venue: Venue | None = None,
    ) -> WelcomeOption:
        """Flat-price membership at ``venue`` (default: the primary venue),
        member-rate parking, and a per-person charge for visits elsewhere."""
        welcome = self.catalog.welcome
        venue = venue or self.pricer.determine_primary_venue(plan)
        pricing = self.catalog.venue(venue)

        family_size = self.pricer.family_size(plan)
        people = min(family_size, welcome.max_people)
        member_children = self.pricer.count_member_children(plan.child_ages)
        exceeds = (
            family_size > welcome.max_people
            or plan.adult_count > welcome.max_adults
            or member_children > welcome.max_children
        )

        parking_visits = self.pricer.parking_visits(plan) if plan.include_parking else 0
        parking_cost = self.pricer.parking_cost(parking_visits, self.catalog.parking.welcome)

        cross_visits = sum(
            self.pricer.cap_visits(plan.visits(v)) for v in self.catalog.venues if v != venue
        )
        cross_cost = cross_visits * people * welcome.single_visit_price

        base = welcome.membership_price
        total = base + parking_cost + cross_cost
        regular = self.pricer.compute_regular_admission_cost(plan)
        savings = max(ZERO, regular - total)

        items = [CostBreakdownItem(
            label=self.welcome_label(venue),
            amount=base,
            details=f"Annual membership for up to {welcome.max_people} people",
        )]
        if parking_cost > 0:
            items.append(CostBreakdownItem(
                label="Parking",
                amount=parking_cost,
                details=f"{parking_visits} visits × {format_currency(self.catalog.parking.welcome)} per visit",
            ))
        if cross_cost > 0:
            items.append(CostBreakdownItem(
                label="Cross-location Visits",
                amount=cross_cost,
                details=(
                    f"{cross_visits} visits × {people} people × "
                    f"{format_currency(welcome.single_visit_price)} per person"
                ),
            ))

        logger.debug(f"Welcome option at {venue.value}: total={total}, regular={regular}")
        return WelcomeOption(
            label=self.welcome_label(venue),
            venue=venue,
            base_price=base,
            parking_cost=parking_cost,
            cross_location_visits=cross_visits,
            cross_location_cost=cross_cost,
            total_cost=total,
            people_included=people,
            max_people=welcome.max_people,
            exceeds_program_limits=exceeds,
            regular_admission_cost=regular,
            savings=savings,
            savings_percentage=savings_percentage(savings, regular, self.max_savings_percentage),
            breakdown=tuple(items),
            purchase_link=pricing.welcome_purchase_link,
            info_link=pricing.welcome_info_link,
            explanation=(
                f"Includes {people} people (up to {welcome.max_adults} adults and "
                f"{welcome.max_children} children) with access to {pricing.name}. "
                f"{format_currency(welcome.single_visit_price)} admission per person at other locations."
            ),
        )

    def compute_welcome_single_visit_pricing(self, plan: VisitPlan, venue: Venue) -> WelcomeSingleVisit:
        welcome = self.catalog.welcome
        pricing = self.catalog.venue(venue)
        people = min(self.pricer.family_size(plan), welcome.max_single_visit_group)
        admission = people * welcome.single_visit_price
        parking = (
            self.catalog.parking.welcome
            if plan.include_parking and pricing.charges_parking
            else ZERO
        )

        items = [CostBreakdownItem(
            label=f"Welcome Program Admission ({pricing.name})",
            amount=admission,
            details=f"{people} people × {format_currency(welcome.single_visit_price)} per person",
        )]
        if parking > 0:
            items.append(CostBreakdownItem(
                label="Parking",
                amount=parking,
                details=f"{format_currency(parking)} flat rate",
            ))

        return WelcomeSingleVisit(
            venue=venue,
            label=f"Discovery Place Welcome Program Single Visit ({pricing.name})",
            price_per_person=welcome.single_visit_price,
            people=people,
            admission_cost=admission,
            parking_cost=parking,
            total_cost=admission + parking,
            breakdown=tuple(items),
            purchase_link=pricing.welcome_purchase_link,
            info_link=pricing.welcome_info_link,
        )

    # ------------------------------------------------------------------ #
    #  Educator / military                                                #
    # ------------------------------------------------------------------ #

    def eligibility_discount_amount(self, discount_type: DiscountType, venue: Venue) -> Decimal:
        return self.catalog.eligibility_discounts.amount_for(discount_type, venue)

    def apply_eligibility_discount(
        self,
        base_price: Decimal,
        discount_type: DiscountType,
        venue: Venue,
    ) -> Decimal:
        """Flat subtraction keyed by discount type and the product's anchor venue, floored at 0."""
        amount = self.eligibility_discount_amount(discount_type, venue)
        return max(ZERO, base_price - amount)
