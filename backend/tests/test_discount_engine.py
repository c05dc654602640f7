from decimal import Decimal

import pytest

from memberwise.data.catalog import DiscountType, MembershipProduct, Venue
from memberwise.services.discount_engine import DiscountEngine

from conftest import INSIDE_PROMOTION, OUTSIDE_PROMOTION


class TestGuestSavings:
    def test_home_venue_cap(self, discounts, make_plan):
        plan = make_plan(adults=8, science=1)
        line = discounts.guest_discount_for_venue(plan, MembershipProduct.SCIENCE, Venue.SCIENCE)
        assert line.guest_cap == 6
        assert line.discounted_adults == 6
        assert line.saving == Decimal("71.85")

    def test_cap_goes_to_adults_first(self, discounts, make_plan):
        plan = make_plan(adults=2, children=(3, 4, 5, 6, 7), dpkh=1)
        line = discounts.guest_discount_for_venue(plan, MembershipProduct.SCIENCE, Venue.KIDS_HUNTERSVILLE)
        assert line.guest_cap == 4
        assert (line.discounted_adults, line.discounted_children) == (2, 2)
        assert line.saving == Decimal("15.95")

    def test_discounted_guests_never_exceed_cap(self, discounts, make_plan):
        plan = make_plan(adults=8, children=tuple(range(2, 14)), science=2, dpkh=2, dpkr=2)
        for product in (MembershipProduct.SCIENCE, MembershipProduct.KIDS_ROCKINGHAM, MembershipProduct.SCIENCE_KIDS):
            for venue in Venue:
                line = discounts.guest_discount_for_venue(plan, product, venue)
                assert line.discounted_guests <= discounts.catalog.guest_discount_cap(product, venue)

    def test_saving_rounded_once_per_venue(self, discounts, make_plan):
        plan = make_plan(adults=1, dpkh=10)
        savings = discounts.compute_guest_admission_savings(plan, MembershipProduct.SCIENCE)
        assert savings.total == Decimal("39.88")
        assert [line.venue for line in savings.breakdown] == [Venue.KIDS_HUNTERSVILLE]

    def test_basic_membership_saves_nothing(self, discounts, make_plan):
        plan = make_plan(adults=1, science=5, dpkh=5)
        savings = discounts.compute_guest_admission_savings(plan, MembershipProduct.SCIENCE_BASIC)
        assert savings.total == 0
        assert savings.items() == ()

    def test_no_visits_no_line(self, discounts, make_plan):
        plan = make_plan(adults=2, science=3)
        assert discounts.guest_discount_for_venue(plan, MembershipProduct.SCIENCE, Venue.KIDS_ROCKINGHAM) is None


class TestPromotionalDiscount:
    @pytest.fixture
    def promo(self, promo_catalog):
        return DiscountEngine(promo_catalog, today=lambda: INSIDE_PROMOTION)

    def test_eligibility(self, promo):
        assert promo.is_eligible_for_promotional_discount(4, Venue.SCIENCE, MembershipProduct.SCIENCE)
        assert promo.is_eligible_for_promotional_discount(3, Venue.KIDS_HUNTERSVILLE, MembershipProduct.KIDS_HUNTERSVILLE)
        assert not promo.is_eligible_for_promotional_discount(2, Venue.SCIENCE, MembershipProduct.SCIENCE)
        assert not promo.is_eligible_for_promotional_discount(4, Venue.KIDS_ROCKINGHAM, MembershipProduct.KIDS_ROCKINGHAM)
        assert not promo.is_eligible_for_promotional_discount(4, Venue.SCIENCE, MembershipProduct.SCIENCE_BASIC)

    def test_outside_window(self, promo):
        assert not promo.is_eligible_for_promotional_discount(
            4, Venue.SCIENCE, MembershipProduct.SCIENCE, on=OUTSIDE_PROMOTION,
        )

    def test_discount_rounds_to_whole_dollars(self, promo):
        assert promo.apply_promotional_discount(Decimal("249"), 4, Venue.SCIENCE, MembershipProduct.SCIENCE) == Decimal("199")
        assert promo.apply_promotional_discount(Decimal("349"), 4, Venue.SCIENCE, MembershipProduct.SCIENCE_KIDS) == Decimal("279")

    def test_ineligible_price_unchanged(self, promo):
        assert promo.apply_promotional_discount(Decimal("209"), 2, Venue.SCIENCE, MembershipProduct.SCIENCE) == Decimal("209")

    def test_zero_rate_keeps_eligibility_but_not_discount(self, discounts):
        assert discounts.is_eligible_for_promotional_discount(
            4, Venue.SCIENCE, MembershipProduct.SCIENCE, on=INSIDE_PROMOTION,
        )
        price = discounts.apply_promotional_discount(
            Decimal("249"), 4, Venue.SCIENCE, MembershipProduct.SCIENCE, on=INSIDE_PROMOTION,
        )
        assert price == Decimal("249")

    def test_zero_base_price(self, promo):
        assert promo.apply_promotional_discount(Decimal("0"), 4, Venue.SCIENCE, MembershipProduct.SCIENCE) == 0

    def test_eligibility_message(self, promo):
        assert "requires 3 or more" in promo.eligibility_message(2, Venue.SCIENCE, MembershipProduct.SCIENCE)
        assert "do not qualify" in promo.eligibility_message(4, Venue.KIDS_ROCKINGHAM, MembershipProduct.KIDS_ROCKINGHAM)
        message = promo.eligibility_message(4, Venue.SCIENCE, MembershipProduct.SCIENCE)
        assert message.startswith("Eligible for 20% membership discount")
        assert "50% off for up to 6 guests at Discovery Place Science" in message

    def test_no_banner_without_title(self, promo, discounts):
        assert promo.promotion_banner() is None
        assert discounts.promotion_banner() is None


class TestWelcomeProgram:
    def test_flat_price_with_parking(self, discounts, make_plan):
        plan = make_plan(adults=2, children=(5, 7), science=3, parking=True)
        option = discounts.compute_welcome_program_pricing(plan)
        assert option.base_price == Decimal("75")
        assert option.parking_cost == Decimal("24")
        assert option.total_cost == Decimal("99")
        assert option.regular_admission_cost == Decimal("311.40")
        assert option.savings == Decimal("212.40")
        assert option.savings_percentage == 68
        assert sum(item.amount for item in option.breakdown) == option.total_cost

    def test_cross_location_per_person(self, discounts, make_plan):
        plan = make_plan(adults=2, children=(5, 7), science=2, dpkh=2, parking=True)
        option = discounts.compute_welcome_program_pricing(plan)
        assert option.venue == Venue.SCIENCE
        assert option.cross_location_visits == 2
        assert option.cross_location_cost == Decimal("24")
        assert option.total_cost == Decimal("115")

    def test_headcount_capped(self, discounts, make_plan):
        plan = make_plan(adults=4, children=(3, 4, 5, 6, 7, 8), science=1, dpkh=1)
        option = discounts.compute_welcome_program_pricing(plan)
        assert option.people_included == 8
        assert option.exceeds_program_limits
        assert option.cross_location_cost == Decimal("24")
        assert option.base_price == Decimal("75")

    def test_links_follow_venue(self, discounts, make_plan):
        plan = make_plan(adults=1, dpkr=2)
        option = discounts.compute_welcome_program_pricing(plan)
        assert option.venue == Venue.KIDS_ROCKINGHAM
        assert "dpkidsrockingham.org" in option.info_link


class TestWelcomeSingleVisit:
    def test_science_adds_parking(self, discounts, make_plan):
        visit = discounts.compute_welcome_single_visit_pricing(
            make_plan(adults=2, children=(4, 6), parking=True), Venue.SCIENCE,
        )
        assert visit.admission_cost == Decimal("12")
        assert visit.parking_cost == Decimal("8")
        assert visit.total_cost == Decimal("20")

    def test_group_capped(self, discounts, make_plan):
        visit = discounts.compute_welcome_single_visit_pricing(
            make_plan(adults=8, children=(4, 6), parking=True), Venue.SCIENCE,
        )
        assert visit.people == 6
        assert visit.total_cost == Decimal("26")

    def test_no_parking_at_kids_venue(self, discounts, make_plan):
        visit = discounts.compute_welcome_single_visit_pricing(
            make_plan(adults=2, children=(4, 6), parking=True), Venue.KIDS_HUNTERSVILLE,
        )
        assert visit.total_cost == Decimal("12")


class TestEligibilityDiscount:
    def test_military_at_rockingham(self, discounts):
        assert discounts.apply_eligibility_discount(Decimal("129"), DiscountType.MILITARY, Venue.KIDS_ROCKINGHAM) == Decimal("99")

    def test_educator(self, discounts):
        assert discounts.apply_eligibility_discount(Decimal("209"), DiscountType.EDUCATOR, Venue.SCIENCE) == Decimal("189")

    def test_floored_at_zero(self, discounts):
        assert discounts.apply_eligibility_discount(Decimal("10"), DiscountType.EDUCATOR, Venue.SCIENCE) == 0

    def test_none_leaves_price(self, discounts):
        assert discounts.apply_eligibility_discount(Decimal("209"), DiscountType.NONE, Venue.SCIENCE) == Decimal("209")
