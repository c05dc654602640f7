from decimal import Decimal

from memberwise.data.catalog import Venue


class TestFamilySize:
    def test_children_count_from_age_two(self, pricer, make_plan):
        plan = make_plan(adults=2, children=(0, 1, 2, 9))
        assert pricer.family_size(plan) == 4

    def test_no_adults_only_infants(self, pricer, make_plan):
        assert pricer.family_size(make_plan(adults=0, children=(0, 1))) == 0


class TestPerVisitCost:
    def test_single_visit_cost_skips_free_infants(self, pricer, make_plan):
        plan = make_plan(adults=2, children=(1, 5))
        assert pricer.single_visit_cost(plan, Venue.SCIENCE) == 2 * Decimal("23.95") + Decimal("18.95")

    def test_single_visit_cost_at_kids_venue(self, pricer, make_plan):
        plan = make_plan(adults=2, children=(1, 5))
        assert pricer.single_visit_cost(plan, Venue.KIDS_HUNTERSVILLE) == 4 * Decimal("15.95")

    def test_paying_children_follow_venue_age_threshold(self, pricer, catalog):
        ages = (0, 1, 2)
        assert pricer.count_eligible_children(ages, catalog.venue(Venue.SCIENCE)) == 1
        assert pricer.count_eligible_children(ages, catalog.venue(Venue.KIDS_HUNTERSVILLE)) == 2

    def test_venue_admission_uses_per_visit_cost(self, pricer, make_plan):
        plan = make_plan(adults=1, children=(4,), dpkh=3)
        admission = pricer.venue_admission(plan, Venue.KIDS_HUNTERSVILLE)
        assert admission.per_visit_cost == pricer.single_visit_cost(plan, Venue.KIDS_HUNTERSVILLE)
        assert admission.total == 3 * admission.per_visit_cost


class TestRegularAdmission:
    def test_two_adults_primary_venue(self, pricer, make_plan):
        plan = make_plan(adults=2, science=4)
        assert pricer.compute_regular_admission_cost(plan) == 4 * 2 * Decimal("23.95")

    def test_free_infants_at_science(self, pricer, make_plan):
        plan = make_plan(adults=1, children=(1, 5), science=1)
        assert pricer.compute_regular_admission_cost(plan) == Decimal("23.95") + Decimal("18.95")

    def test_one_year_old_pays_at_kids_venues(self, pricer, make_plan):
        plan = make_plan(adults=1, children=(1,), dpkh=2)
        assert pricer.compute_regular_admission_cost(plan) == 2 * 2 * Decimal("15.95")

    def test_resident_pricing_at_rockingham(self, pricer, make_plan):
        plan = make_plan(adults=2, children=(0, 3), dpkr=1, resident=True)
        assert pricer.compute_regular_admission_cost(plan) == Decimal("17.85")

    def test_resident_flag_ignored_elsewhere(self, pricer, make_plan):
        plan = make_plan(adults=1, dpkh=1, resident=True)
        assert pricer.compute_regular_admission_cost(plan) == Decimal("15.95")

    def test_standard_parking_at_science_only(self, pricer, make_plan):
        plan = make_plan(adults=2, children=(5, 7), science=3, dpkh=2, parking=True)
        breakdown = pricer.regular_admission_breakdown(plan)
        assert breakdown.parking_visits == 3
        assert breakdown.parking_cost == Decimal("54")
        # 3 × 85.80 + 2 × 63.80 + 54
        assert breakdown.total == Decimal("439.00")

    def test_breakdown_items_sum_to_total(self, pricer, make_plan):
        plan = make_plan(adults=2, children=(5,), science=3, dpkh=1, dpkr=2, parking=True)
        breakdown = pricer.regular_admission_breakdown(plan)
        assert sum(item.amount for item in breakdown.items()) == breakdown.total
        assert [v.venue for v in breakdown.venues] == [
            Venue.SCIENCE, Venue.KIDS_HUNTERSVILLE, Venue.KIDS_ROCKINGHAM,
        ]

    def test_no_visits_costs_nothing(self, pricer, make_plan):
        assert pricer.compute_regular_admission_cost(make_plan(adults=3, parking=True)) == 0

    def test_more_visits_never_cost_less(self, pricer, make_plan):
        costs = [
            pricer.compute_regular_admission_cost(make_plan(adults=1, children=(4,), dpkh=n, science=2))
            for n in range(0, 25)
        ]
        assert costs == sorted(costs)


class TestVisitCounting:
    def test_total_visits_capped(self, pricer, make_plan):
        plan = make_plan(science=20, dpkh=20, dpkr=20)
        assert pricer.count_total_visits(plan) == 40

    def test_total_visits_sum(self, pricer, make_plan):
        assert pricer.count_total_visits(make_plan(science=3, dpkr=4)) == 7


class TestPrimaryVenue:
    def test_most_visits_wins(self, pricer, make_plan):
        assert pricer.determine_primary_venue(make_plan(science=5, dpkh=6)) == Venue.KIDS_HUNTERSVILLE

    def test_tie_goes_to_science(self, pricer, make_plan):
        assert pricer.determine_primary_venue(make_plan(science=5, dpkh=5)) == Venue.SCIENCE

    def test_no_visits_defaults_to_science(self, pricer, make_plan):
        assert pricer.determine_primary_venue(make_plan()) == Venue.SCIENCE

    def test_tie_between_kids_venues_keeps_catalog_order(self, pricer, make_plan):
        assert pricer.determine_primary_venue(make_plan(dpkh=3, dpkr=3)) == Venue.KIDS_HUNTERSVILLE
