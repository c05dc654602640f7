"""Recommendation engine configuration - knobs that change how candidates are compared."""

from dataclasses import dataclass

from memberwise.data.catalog import MembershipProduct


@dataclass(frozen=True)
class EngineOptions:
    """Comparison and reporting thresholds."""
    max_savings_percentage: int = 90          # displayed savings never exceed this
    # Educator/military discounts normally adjust the winner only. When True
    # they are applied to every candidate before the cheapest one is picked.
    eligibility_discount_in_comparison: bool = False
    prefer_bundle_on_tie: bool = True
    bundle_product: MembershipProduct = MembershipProduct.SCIENCE_KIDS


engine_options = EngineOptions()
