"""Pricing catalog - single source for every admission, membership and discount number.

Tables are declarative frozen dataclasses. Nothing here computes a cost; the
pricer, discount engine and recommendation engine all read from a
``PricingCatalog`` instance that is passed to them.

All prices are USD ``Decimal`` values.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

SUPPORTED_PARTY_SIZES = 10


class CatalogLookupError(LookupError):
    """Raised when a venue or product is missing from the catalog."""


class Venue(str, Enum):
    SCIENCE = "Science"
    KIDS_HUNTERSVILLE = "DPKH"
    KIDS_ROCKINGHAM = "DPKR"


class MembershipProduct(str, Enum):
    SCIENCE_BASIC = "ScienceBasic"
    SCIENCE = "Science"
    KIDS_HUNTERSVILLE = "DPKH"
    KIDS_ROCKINGHAM = "DPKR"
    SCIENCE_KIDS = "ScienceKids"
    WELCOME = "Welcome"
    PAY_AS_YOU_GO = "PayAsYouGo"


class DiscountType(str, Enum):
    NONE = "none"
    EDUCATOR = "educator"
    MILITARY = "military"


# Products the engine prices from a tier table. Welcome and Pay-As-You-Go are
# priced by their own rules.
TIERED_PRODUCTS: tuple[MembershipProduct, ...] = (
    MembershipProduct.SCIENCE_BASIC,
    MembershipProduct.SCIENCE,
    MembershipProduct.KIDS_HUNTERSVILLE,
    MembershipProduct.KIDS_ROCKINGHAM,
    MembershipProduct.SCIENCE_KIDS,
)


def _money(*values: str) -> tuple[Decimal, ...]:
    return tuple(Decimal(v) for v in values)


@dataclass(frozen=True)
class AdmissionPrice:
    adult: Decimal
    child: Decimal


@dataclass(frozen=True)
class VenuePricing:
    """Admission prices and reference data for one venue."""
    venue: Venue
    name: str
    standard: AdmissionPrice
    child_age_threshold: int          # children younger than this are free
    resident: AdmissionPrice | None = None
    charges_parking: bool = False
    address: str = ""
    description: str = ""
    welcome_purchase_link: str = ""
    welcome_info_link: str = ""

    @property
    def has_resident_pricing(self) -> bool:
        return self.resident is not None

    def admission(self, resident: bool = False) -> AdmissionPrice:
        if resident and self.resident is not None:
            return self.resident
        return self.standard

    def is_free_for_age(self, age: int) -> bool:
        return age < self.child_age_threshold


@dataclass(frozen=True)
class TierPrice:
    """Result of a price-table lookup."""
    amount: Decimal
    priced_family_size: int     # tier actually used
    requested_family_size: int

    @property
    def is_fallback(self) -> bool:
        """True when a larger tier stood in for a size with no tier of its own."""
        return self.priced_family_size > self.requested_family_size


@dataclass(frozen=True)
class MembershipTier:
    """One membership product: price table, coverage and guest-discount row."""
    product: MembershipProduct
    label: str
    prices: tuple[Decimal, ...]                  # index 0 = 1 person; 0 = no tier
    home_venues: frozenset[Venue]
    anchor_venue: Venue
    guest_discounts: dict[Venue, Decimal]
    max_family_size: int | None = None
    icon_type: str = ""
    purchase_link: str = ""
    description: str = ""

    def __post_init__(self):
        if len(self.prices) != SUPPORTED_PARTY_SIZES:
            raise ValueError(
                f"{self.product.value} price table must have {SUPPORTED_PARTY_SIZES} "
                f"entries, got {len(self.prices)}"
            )
        if any(p < 0 for p in self.prices):
            raise ValueError(f"{self.product.value} price table has a negative price")

    @property
    def min_family_size(self) -> int:
        """Smallest party size with a real tier (0 when none)."""
        for size, price in enumerate(self.prices, start=1):
            if price > 0:
                return size
        return 0

    def is_available_for(self, family_size: int) -> bool:
        if family_size < 1 or self.min_family_size == 0:
            return False
        if self.max_family_size is not None and family_size > self.max_family_size:
            return False
        return True

    def price_for(self, family_size: int) -> TierPrice | None:
        """Look up the tier price, falling back to the next larger tier when
        the requested size has none. Sizes above the table use the last tier."""
        if not self.is_available_for(family_size):
            return None
        index = min(family_size, len(self.prices)) - 1
        for i in range(index, len(self.prices)):
            if self.prices[i] > 0:
                return TierPrice(
                    amount=self.prices[i],
                    priced_family_size=i + 1,
                    requested_family_size=family_size,
                )
        return None

    def covers(self, venue: Venue) -> bool:
        return venue in self.home_venues

    def guest_discount_rate(self, venue: Venue) -> Decimal:
        return self.guest_discounts.get(venue, Decimal("0"))


@dataclass(frozen=True)
class ProductInfo:
    """Label and links for products without a tier table."""
    label: str
    purchase_link: str
    icon_type: str = ""
    description: str = ""


@dataclass(frozen=True)
class ParkingRates:
    member: Decimal = Decimal("8")
    welcome: Decimal = Decimal("8")
    standard: Decimal = Decimal("18")     # estimated 3h non-member visit


@dataclass(frozen=True)
class GuestDiscountLimits:
    """Maximum discounted guests per visit, per discount tier."""
    home_venue: int = 6
    other_venues: int = 4


@dataclass(frozen=True)
class PromotionalDiscount:
    minimum_members: int = 3
    eligible_venues: frozenset[Venue] = frozenset({Venue.SCIENCE, Venue.KIDS_HUNTERSVILLE})
    eligible_products: frozenset[MembershipProduct] = frozenset({
        MembershipProduct.SCIENCE,
        MembershipProduct.KIDS_HUNTERSVILLE,
        MembershipProduct.SCIENCE_KIDS,
    })
    never_eligible_venues: frozenset[Venue] = frozenset({Venue.KIDS_ROCKINGHAM})
    current_rate: Decimal = Decimal("0.0")    # was 0.2 during the spring 2025 promotion
    start_date: date = date(2025, 1, 1)
    end_date: date = date(2025, 6, 30)
    banner_title: str = ""
    banner_description: str = ""

    def is_active(self, on: date) -> bool:
        return self.start_date <= on <= self.end_date


@dataclass(frozen=True)
class EligibilityDiscounts:
    """Flat dollar discounts for educator / military families.

    ``by_venue`` overrides ``default`` for a specific anchor venue.
    """
    default: dict[DiscountType, Decimal] = field(default_factory=lambda: {
        DiscountType.EDUCATOR: Decimal("20"),
        DiscountType.MILITARY: Decimal("20"),
    })
    by_venue: dict[tuple[DiscountType, Venue], Decimal] = field(default_factory=lambda: {
        (DiscountType.MILITARY, Venue.KIDS_ROCKINGHAM): Decimal("30"),
    })

    def amount_for(self, discount_type: DiscountType, venue: Venue) -> Decimal:
        if discount_type == DiscountType.NONE:
            return Decimal("0")
        override = self.by_venue.get((discount_type, venue))
        if override is not None:
            return override
        return self.default.get(discount_type, Decimal("0"))


@dataclass(frozen=True)
class WelcomeProgram:
    """NC/SC EBT and WIC cardholder pricing."""
    membership_price: Decimal = Decimal("75")
    max_people: int = 8
    max_adults: int = 2
    max_children: int = 6
    single_visit_price: Decimal = Decimal("3")
    max_single_visit_group: int = 6
    eligibility_requirements: tuple[str, ...] = (
        "Must be a current North Carolina or South Carolina EBT or WIC cardholder",
        "Must present valid ID and EBT/WIC card when purchasing or using membership",
        "Available for purchase online or at any Discovery Place location",
    )


@dataclass(frozen=True)
class Constraints:
    MAX_ADULTS: int = 8
    MAX_CHILDREN: int = 12
    MAX_CHILD_AGE: int = 21
    MAX_VISITS_PER_LOCATION: int = 20
    MAX_TOTAL_VISITS: int = 40

    @property
    def max_family_size(self) -> int:
        return self.MAX_ADULTS + self.MAX_CHILDREN


def _default_venues() -> dict[Venue, VenuePricing]:
    return {
        Venue.SCIENCE: VenuePricing(
            venue=Venue.SCIENCE,
            name="Discovery Place Science",
            standard=AdmissionPrice(adult=Decimal("23.95"), child=Decimal("18.95")),
            child_age_threshold=2,
            charges_parking=True,
            address="301 N Tryon St, Charlotte, NC 28202",
            description="Our flagship science museum in Uptown Charlotte featuring interactive exhibits for all ages",
            welcome_purchase_link="https://visit.discoveryplace.org/science/events/36a58ae8-155d-8116-9188-7d0b6fae199c?tg=d99160b3-94fd-9362-978e-44607faf4b03",
            welcome_info_link="https://discoveryplace.org/visit/welcome-program/",
        ),
        Venue.KIDS_HUNTERSVILLE: VenuePricing(
            venue=Venue.KIDS_HUNTERSVILLE,
            name="Discovery Place Kids-Huntersville",
            standard=AdmissionPrice(adult=Decimal("15.95"), child=Decimal("15.95")),
            child_age_threshold=1,
            address="105 Gilead Rd, Huntersville, NC 28078",
            description="Children's museum in Huntersville designed for children 10 and under",
            welcome_purchase_link="https://visit.discoveryplace.org/huntersville/events/7877bc4b-7702-fb6d-b750-01a851e506db?tg=d99160b3-94fd-9362-978e-44607faf4b03",
            welcome_info_link="https://discoveryplacekids.org/welcome-program/",
        ),
        Venue.KIDS_ROCKINGHAM: VenuePricing(
            venue=Venue.KIDS_ROCKINGHAM,
            name="Discovery Place Kids-Rockingham",
            standard=AdmissionPrice(adult=Decimal("9.95"), child=Decimal("9.95")),
            resident=AdmissionPrice(adult=Decimal("5.95"), child=Decimal("5.95")),
            child_age_threshold=1,
            address="233 E Washington St, Rockingham, NC 28379",
            description="Children's museum in Rockingham designed for children 10 and under",
            welcome_purchase_link="https://visit.discoveryplace.org/rockingham/events/fb6d6074-79dd-d53a-a5c9-84b7c12ae844?tg=d99160b3-94fd-9362-978e-44607faf4b03",
            welcome_info_link="https://dpkidsrockingham.org/welcome-program/",
        ),
    }


def _guest_row(home: Decimal, others: Decimal, home_venues: set[Venue]) -> dict[Venue, Decimal]:
    return {v: (home if v in home_venues else others) for v in Venue}


def _default_memberships() -> dict[MembershipProduct, MembershipTier]:
    half, quarter, none = Decimal("0.5"), Decimal("0.25"), Decimal("0")
    science_link = "https://visit.discoveryplace.org/science/events/36a58ae8-155d-8116-9188-7d0b6fae199c"
    return {
        MembershipProduct.SCIENCE_BASIC: MembershipTier(
            product=MembershipProduct.SCIENCE_BASIC,
            label="Discovery Place Science Basic Membership",
            prices=_money("109", "0", "0", "0", "0", "0", "0", "0", "0", "0"),
            home_venues=frozenset({Venue.SCIENCE}),
            anchor_venue=Venue.SCIENCE,
            guest_discounts=_guest_row(none, none, {Venue.SCIENCE}),
            max_family_size=1,
            icon_type="science-basic",
            purchase_link=science_link,
            description="Access to Discovery Place Science for one adult only. No guest discounts or cross-location visit benefits included.",
        ),
        MembershipProduct.SCIENCE: MembershipTier(
            product=MembershipProduct.SCIENCE,
            label="Discovery Place Science Membership",
            prices=_money("189", "209", "229", "249", "269", "289", "309", "329", "349", "369"),
            home_venues=frozenset({Venue.SCIENCE}),
            anchor_venue=Venue.SCIENCE,
            guest_discounts=_guest_row(half, quarter, {Venue.SCIENCE}),
            icon_type="science",
            purchase_link=science_link,
            description="Access to Discovery Place Science for all named members, plus guest discounts and cross-location visit benefits",
        ),
        MembershipProduct.KIDS_HUNTERSVILLE: MembershipTier(
            product=MembershipProduct.KIDS_HUNTERSVILLE,
            label="Discovery Place Kids-Huntersville Membership",
            prices=_money("0", "209", "229", "249", "269", "289", "309", "329", "349", "369"),
            home_venues=frozenset({Venue.KIDS_HUNTERSVILLE}),
            anchor_venue=Venue.KIDS_HUNTERSVILLE,
            guest_discounts=_guest_row(half, quarter, {Venue.KIDS_HUNTERSVILLE}),
            icon_type="kids-huntersville",
            purchase_link="https://visit.discoveryplace.org/huntersville/events/7877bc4b-7702-fb6d-b750-01a851e506db",
            description="Access to Discovery Place Kids-Huntersville for all named members, plus guest discounts at other locations",
        ),
        MembershipProduct.KIDS_ROCKINGHAM: MembershipTier(
            product=MembershipProduct.KIDS_ROCKINGHAM,
            label="Discovery Place Kids-Rockingham Membership",
            prices=_money("0", "129", "139", "149", "159", "169", "179", "189", "199", "209"),
            home_venues=frozenset({Venue.KIDS_ROCKINGHAM}),
            anchor_venue=Venue.KIDS_ROCKINGHAM,
            guest_discounts=_guest_row(half, quarter, {Venue.KIDS_ROCKINGHAM}),
            icon_type="kids-rockingham",
            purchase_link="https://visit.discoveryplace.org/rockingham/events/fb6d6074-79dd-d53a-a5c9-84b7c12ae844",
            description="Access to Discovery Place Kids-Rockingham for all named members, plus guest discounts at other locations",
        ),
        MembershipProduct.SCIENCE_KIDS: MembershipTier(
            product=MembershipProduct.SCIENCE_KIDS,
            label="Discovery Place Science + Kids Membership",
            prices=_money("0", "309", "329", "349", "369", "389", "409", "429", "449", "469"),
            home_venues=frozenset(Venue),
            anchor_venue=Venue.SCIENCE,
            guest_discounts=_guest_row(half, half, set(Venue)),
            icon_type="science-kids",
            purchase_link=science_link,
            description="Access to ALL Discovery Place locations for all named members, with guest discounts at all locations",
        ),
    }


def _default_product_info() -> dict[MembershipProduct, ProductInfo]:
    return {
        MembershipProduct.WELCOME: ProductInfo(
            label="Discovery Place Welcome Program",
            purchase_link="https://visit.discoveryplace.org/science/events/36a58ae8-155d-8116-9188-7d0b6fae199c?tg=d99160b3-94fd-9362-978e-44607faf4b03",
            icon_type="welcome",
            description="$75 per year for NC/SC EBT/WIC cardholders - includes admission for up to 8 people and parking",
        ),
        MembershipProduct.PAY_AS_YOU_GO: ProductInfo(
            label="Pay As You Go (Regular Admission)",
            purchase_link="https://discoveryplace.org/visit/buy-tickets/",
            icon_type="ticket",
            description="Regular admission tickets purchased for each visit",
        ),
    }


@dataclass(frozen=True)
class PricingCatalog:
    """Top-level catalog aggregating every pricing table."""
    venues: dict[Venue, VenuePricing] = field(default_factory=_default_venues)
    memberships: dict[MembershipProduct, MembershipTier] = field(default_factory=_default_memberships)
    product_info: dict[MembershipProduct, ProductInfo] = field(default_factory=_default_product_info)
    parking: ParkingRates = field(default_factory=ParkingRates)
    guest_limits: GuestDiscountLimits = field(default_factory=GuestDiscountLimits)
    promotion: PromotionalDiscount = field(default_factory=PromotionalDiscount)
    eligibility_discounts: EligibilityDiscounts = field(default_factory=EligibilityDiscounts)
    welcome: WelcomeProgram = field(default_factory=WelcomeProgram)
    constraints: Constraints = field(default_factory=Constraints)
    child_counts_as_person_age: int = 2
    default_primary_venue: Venue = Venue.SCIENCE

    def venue(self, venue: Venue) -> VenuePricing:
        try:
            return self.venues[venue]
        except KeyError:
            raise CatalogLookupError(f"Unknown venue: {venue}") from None

    def membership(self, product: MembershipProduct) -> MembershipTier:
        try:
            return self.memberships[product]
        except KeyError:
            raise CatalogLookupError(f"No price table for product: {product}") from None

    def label_for(self, product: MembershipProduct) -> str:
        if product in self.memberships:
            return self.memberships[product].label
        if product in self.product_info:
            return self.product_info[product].label
        return product.value

    def purchase_link_for(self, product: MembershipProduct) -> str:
        if product in self.memberships:
            return self.memberships[product].purchase_link
        if product in self.product_info:
            return self.product_info[product].purchase_link
        return ""

    @property
    def parking_venues(self) -> list[Venue]:
        return [v for v, pricing in self.venues.items() if pricing.charges_parking]

    def guest_discount_cap(self, product: MembershipProduct, venue: Venue) -> int:
        """Per-visit discounted-guest cap for ``venue`` under ``product``."""
        if self.membership(product).covers(venue):
            return self.guest_limits.home_venue
        return self.guest_limits.other_venues


# Read-only default; pass an alternate PricingCatalog to the services to override.
default_catalog = PricingCatalog()
