"""Recommendation output models."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from memberwise.data.catalog import MembershipProduct, Venue


class RecommendationStatus(str, Enum):
    RECOMMENDED = "recommended"
    NO_VISITS = "no_visits"
    NO_ELIGIBLE_MEMBERS = "no_eligible_members"
    UNAVAILABLE = "unavailable"         # internal failure; not even regular admission could be priced


class CostBreakdownItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    amount: Decimal
    details: str | None = None


class GuestSavingsItem(BaseModel):
    """Informational guest-discount line; not part of the summed breakdown."""
    model_config = ConfigDict(frozen=True)

    venue: Venue
    label: str
    amount: Decimal
    details: str
    discount_rate: Decimal
    guest_cap: int
    discounted_adults: int
    discounted_children: int


class ProductEvaluation(BaseModel):
    """How one product fared for this family."""
    model_config = ConfigDict(frozen=True)

    product: MembershipProduct
    label: str
    eligible: bool
    reason: str | None = None
    priced_family_size: int | None = None
    base_price: Decimal | None = None
    total_cost: Decimal | None = None
    purchase_link: str = ""


class WelcomeOption(BaseModel):
    """Welcome Program membership priced for a visit plan."""
    model_config = ConfigDict(frozen=True)

    product: MembershipProduct = MembershipProduct.WELCOME
    label: str
    venue: Venue
    base_price: Decimal
    parking_cost: Decimal
    cross_location_visits: int
    cross_location_cost: Decimal
    total_cost: Decimal
    people_included: int
    max_people: int
    exceeds_program_limits: bool = False
    regular_admission_cost: Decimal
    savings: Decimal
    savings_percentage: int
    breakdown: tuple[CostBreakdownItem, ...] = ()
    purchase_link: str = ""
    info_link: str = ""
    explanation: str = ""


class WelcomeSingleVisit(BaseModel):
    """Welcome Program same-day admission at one venue."""
    model_config = ConfigDict(frozen=True)

    venue: Venue
    label: str
    price_per_person: Decimal
    people: int
    admission_cost: Decimal
    parking_cost: Decimal
    total_cost: Decimal
    breakdown: tuple[CostBreakdownItem, ...] = ()
    purchase_link: str = ""
    info_link: str = ""


class Recommendation(BaseModel):
    """Cheapest admission plan for a visit plan, fully itemized.

    ``breakdown`` always sums to ``total_cost``. Built fresh per request.
    """
    model_config = ConfigDict(frozen=True)

    status: RecommendationStatus = RecommendationStatus.RECOMMENDED
    product: MembershipProduct | None = None
    label: str = ""
    base_price: Decimal = Decimal("0")
    membership_price: Decimal = Decimal("0")
    breakdown: tuple[CostBreakdownItem, ...] = ()
    total_cost: Decimal = Decimal("0")
    regular_admission_cost: Decimal = Decimal("0")
    savings: Decimal = Decimal("0")
    savings_percentage: int = 0
    family_size: int = 0
    priced_family_size: int = 0
    primary_venue: Venue | None = None
    total_visits: int = 0
    visits_by_venue: dict[Venue, int] = Field(default_factory=dict)
    evaluations: tuple[ProductEvaluation, ...] = ()
    guest_savings: tuple[GuestSavingsItem, ...] = ()
    guest_savings_total: Decimal = Decimal("0")
    welcome_option: WelcomeOption | None = None
    purchase_link: str = ""
    info_link: str = ""
    notes: tuple[str, ...] = ()
    is_fallback: bool = False

    @property
    def is_empty(self) -> bool:
        return self.status != RecommendationStatus.RECOMMENDED

    @property
    def is_multi_venue(self) -> bool:
        return self.product == MembershipProduct.SCIENCE_KIDS

    @classmethod
    def nothing_to_recommend(
        cls,
        status: RecommendationStatus,
        family_size: int = 0,
        visits_by_venue: dict[Venue, int] | None = None,
    ) -> "Recommendation":
        return cls(
            status=status,
            family_size=family_size,
            visits_by_venue=visits_by_venue or {},
        )
