"""Itemized cost breakdown and savings for a recommendation.

Every line is an exact Decimal; lines always sum to the total they describe.
Discounts appear as negative lines directly under the price they reduce.
"""

from collections.abc import Iterable
from decimal import Decimal

from memberwise.data.catalog import DiscountType
from memberwise.data.currency import ZERO, format_rate, savings_percentage
from memberwise.schemas.recommendation import CostBreakdownItem
from memberwise.services.discount_engine import ELIGIBILITY_LABELS
from memberwise.services.recommendation.candidates import MembershipCandidate


def membership_items(
    candidate: MembershipCandidate,
    discount_type: DiscountType = DiscountType.NONE,
    promotion_rate: Decimal = ZERO,
) -> list[CostBreakdownItem]:
    noun = "person" if candidate.priced_family_size == 1 else "people"
    items = [CostBreakdownItem(
        label=candidate.label,
        amount=candidate.list_price,
        details=f"Annual membership for {candidate.priced_family_size} {noun}",
    )]

    if candidate.promotional_discount > 0:
        items.append(CostBreakdownItem(
            label="Promotional Discount",
            amount=-candidate.promotional_discount,
            details=f"{format_rate(promotion_rate)} off, rounded to the nearest dollar",
        ))

    applied = candidate.applied_eligibility_discount
    if applied > 0:
        items.append(CostBreakdownItem(
            label=ELIGIBILITY_LABELS.get(discount_type, "Discount"),
            amount=-applied,
            details="Flat discount on the membership price",
        ))

    parking = candidate.parking_item()
    if parking is not None:
        items.append(parking)

    items.extend(c.to_item() for c in candidate.cross_location if c.amount > 0)
    return items


def breakdown_total(items: Iterable[CostBreakdownItem]) -> Decimal:
    return sum((item.amount for item in items), ZERO)


def compute_savings(
    total_cost: Decimal,
    regular_admission_cost: Decimal,
    max_percent: int = 90,
) -> tuple[Decimal, int]:
    """(savings floored at 0, whole-number percentage capped at ``max_percent``)."""
    savings = max(ZERO, regular_admission_cost - total_cost)
    return savings, savings_percentage(savings, regular_admission_cost, max_percent)
