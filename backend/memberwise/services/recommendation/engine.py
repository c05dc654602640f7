"""Recommendation engine - picks the cheapest way for a family to cover a year of visits.

Pipeline:
    clamp plan → sentinel check → regular admission baseline
    → Welcome short-circuit (means-tested families)
    → CandidateBuilder per tiered product → CandidateSelector
    → eligibility discount on the winner → Pay-As-You-Go check → Recommendation
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from memberwise.data.catalog import (
    TIERED_PRODUCTS,
    CatalogLookupError,
    DiscountType,
    MembershipProduct,
    PricingCatalog,
    Venue,
    default_catalog,
)
from memberwise.data.currency import ZERO
from memberwise.schemas.recommendation import (
    ProductEvaluation,
    Recommendation,
    RecommendationStatus,
    WelcomeOption,
)
from memberwise.schemas.visit_plan import VisitPlan
from memberwise.services.admission_pricer import AdmissionBreakdown, AdmissionPricer
from memberwise.services.discount_engine import ELIGIBILITY_LABELS, DiscountEngine
from memberwise.services.recommendation.breakdown import compute_savings, membership_items
from memberwise.services.recommendation.candidates import (
    CandidateBuilder,
    MembershipCandidate,
    unavailable_reason,
)
from memberwise.services.recommendation.config import EngineOptions, engine_options
from memberwise.services.recommendation.selector import CandidateSelector

logger = logging.getLogger(__name__)


@dataclass
class _PlanContext:
    plan: VisitPlan
    family_size: int
    total_visits: int
    visits_by_venue: dict[Venue, int]
    primary_venue: Venue
    admission: AdmissionBreakdown | None = None
    evaluations: list[ProductEvaluation] = field(default_factory=list)

    @property
    def regular_admission_cost(self):
        return self.admission.total if self.admission else ZERO


class RecommendationEngine:
    """Stateless orchestrator over an injected ``PricingCatalog``.

    ``recommend`` never raises for plan contents: input is clamped, empty
    plans yield a sentinel, and unexpected failures degrade to a
    Pay-As-You-Go result flagged ``is_fallback`` (or an ``UNAVAILABLE``
    empty result when even regular admission cannot be priced).
    """

    def __init__(
        self,
        catalog: PricingCatalog = default_catalog,
        options: EngineOptions = engine_options,
        today: Callable[[], date] = date.today,
    ):
        self.catalog = catalog
        self.options = options
        self.pricer = AdmissionPricer(catalog)
        self.discounts = DiscountEngine(
            catalog, self.pricer, today=today, max_savings_percentage=options.max_savings_percentage,
        )
        self.builder = CandidateBuilder(catalog, self.pricer, self.discounts, today=today)
        self.selector = CandidateSelector(options)

    def recommend(self, plan: VisitPlan) -> Recommendation:
        try:
            return self._recommend(plan)
        except Exception:
            logger.exception("Recommendation failed; falling back to regular admission")
            return self._fallback(plan)

    # ------------------------------------------------------------------ #
    #  Pipeline                                                           #
    # ------------------------------------------------------------------ #

    def _build_context(self, plan: VisitPlan) -> _PlanContext:
        visits_by_venue = {}
        for venue in self.catalog.venues:
            visits = self.pricer.cap_visits(plan.visits(venue))
            if visits > 0:
                visits_by_venue[venue] = visits
        return _PlanContext(
            plan=plan,
            family_size=self.pricer.family_size(plan),
            total_visits=self.pricer.count_total_visits(plan),
            visits_by_venue=visits_by_venue,
            primary_venue=self.pricer.determine_primary_venue(plan),
        )

    def _empty_result(self, ctx: _PlanContext) -> Recommendation | None:
        if ctx.total_visits == 0:
            status = RecommendationStatus.NO_VISITS
        elif ctx.family_size == 0:
            status = RecommendationStatus.NO_ELIGIBLE_MEMBERS
        else:
            return None
        logger.info(f"Nothing to recommend: {status.value}")
        return Recommendation.nothing_to_recommend(status, ctx.family_size, ctx.visits_by_venue)

    def _recommend(self, plan: VisitPlan) -> Recommendation:
        plan = plan.clamped(self.catalog.constraints)
        ctx = self._build_context(plan)
        empty = self._empty_result(ctx)
        if empty is not None:
            return empty

        ctx.admission = self.pricer.regular_admission_breakdown(plan)
        logger.info(
            f"Recommending for family of {ctx.family_size}, {ctx.total_visits} visits, "
            f"primary venue {ctx.primary_venue.value}, regular cost {ctx.regular_admission_cost}"
        )

        if plan.welcome_eligible:
            return self._recommend_welcome(ctx)

        candidates = self._evaluate_products(ctx)
        if self.options.eligibility_discount_in_comparison:
            candidates = [self._with_eligibility_discount(c, plan.discount_type) for c in candidates]

        best = self.selector.select(candidates, ctx.primary_venue)
        if best is None:
            return self._pay_as_you_go(ctx, notes=["No membership is available for this family size"])
        if self.selector.pay_as_you_go_is_cheaper(best.total_cost, ctx.regular_admission_cost):
            return self._pay_as_you_go(ctx, notes=[
                f"Paying per visit is cheaper than the best membership ({best.label})"
            ])

        if not self.options.eligibility_discount_in_comparison:
            best = self._with_eligibility_discount(best, plan.discount_type)
        return self._membership_recommendation(ctx, best)

    def _evaluate_products(self, ctx: _PlanContext) -> list[MembershipCandidate]:
        """Price every tiered product; record why the others were skipped."""
        candidates = []
        for product in TIERED_PRODUCTS:
            try:
                tier = self.catalog.membership(product)
                candidate = self.builder.build(ctx.plan, product, ctx.family_size)
            except CatalogLookupError as e:
                logger.warning(f"Skipping {product.value}: {e}")
                ctx.evaluations.append(ProductEvaluation(
                    product=product,
                    label=self.catalog.label_for(product),
                    eligible=False,
                    reason="Not offered in the current catalog",
                ))
                continue

            if candidate is None:
                ctx.evaluations.append(ProductEvaluation(
                    product=product,
                    label=tier.label,
                    eligible=False,
                    reason=unavailable_reason(tier, ctx.family_size),
                    purchase_link=tier.purchase_link,
                ))
                continue

            candidates.append(candidate)
            ctx.evaluations.append(candidate.to_evaluation())

        ctx.evaluations.append(self._welcome_evaluation(None))
        ctx.evaluations.append(self._pay_as_you_go_evaluation(ctx))
        return candidates

    def _with_eligibility_discount(
        self,
        candidate: MembershipCandidate,
        discount_type: DiscountType,
    ) -> MembershipCandidate:
        amount = self.discounts.eligibility_discount_amount(discount_type, candidate.anchor_venue)
        if amount <= 0:
            return candidate
        return candidate.with_eligibility_discount(amount)

    # ------------------------------------------------------------------ #
    #  Results                                                            #
    # ------------------------------------------------------------------ #

    def _membership_recommendation(self, ctx: _PlanContext, best: MembershipCandidate) -> Recommendation:
        discount_type = ctx.plan.discount_type
        items = membership_items(best, discount_type, self.catalog.promotion.current_rate)
        savings, percent = compute_savings(
            best.total_cost, ctx.regular_admission_cost, self.options.max_savings_percentage,
        )

        label = best.label
        if best.applied_eligibility_discount > 0:
            label = f"{label} ({ELIGIBILITY_LABELS[discount_type]})"

        guest = self.discounts.compute_guest_admission_savings(ctx.plan, best.product)

        logger.info(f"Recommended {best.product.value}: total {best.total_cost}, savings {savings}")
        return Recommendation(
            product=best.product,
            label=label,
            base_price=best.list_price,
            membership_price=best.membership_price,
            breakdown=tuple(items),
            total_cost=best.total_cost,
            regular_admission_cost=ctx.regular_admission_cost,
            savings=savings,
            savings_percentage=percent,
            family_size=ctx.family_size,
            priced_family_size=best.priced_family_size,
            primary_venue=ctx.primary_venue,
            total_visits=ctx.total_visits,
            visits_by_venue=ctx.visits_by_venue,
            evaluations=tuple(ctx.evaluations),
            guest_savings=guest.items(),
            guest_savings_total=guest.total,
            purchase_link=best.purchase_link,
            notes=tuple(best.notes),
        )

    def _recommend_welcome(self, ctx: _PlanContext) -> Recommendation:
        welcome = self.discounts.compute_welcome_program_pricing(ctx.plan, ctx.primary_venue)
        ctx.evaluations.append(self._welcome_evaluation(welcome))
        ctx.evaluations.append(self._pay_as_you_go_evaluation(ctx))

        if self.selector.pay_as_you_go_is_cheaper(welcome.total_cost, ctx.regular_admission_cost):
            return self._pay_as_you_go(
                ctx,
                notes=["Regular admission is cheaper than the Welcome Program for these visits"],
                welcome_option=welcome,
            )

        notes = []
        if welcome.exceeds_program_limits:
            notes.append(
                f"The Welcome Program covers up to {welcome.max_people} people "
                f"({self.catalog.welcome.max_adults} adults, {self.catalog.welcome.max_children} children)"
            )

        logger.info(f"Recommended Welcome Program: total {welcome.total_cost}, savings {welcome.savings}")
        return Recommendation(
            product=MembershipProduct.WELCOME,
            label=welcome.label,
            base_price=welcome.base_price,
            membership_price=welcome.base_price,
            breakdown=welcome.breakdown,
            total_cost=welcome.total_cost,
            regular_admission_cost=ctx.regular_admission_cost,
            savings=welcome.savings,
            savings_percentage=welcome.savings_percentage,
            family_size=ctx.family_size,
            priced_family_size=welcome.people_included,
            primary_venue=ctx.primary_venue,
            total_visits=ctx.total_visits,
            visits_by_venue=ctx.visits_by_venue,
            evaluations=tuple(ctx.evaluations),
            welcome_option=welcome,
            purchase_link=welcome.purchase_link,
            info_link=welcome.info_link,
            notes=tuple(notes),
        )

    def _pay_as_you_go(
        self,
        ctx: _PlanContext,
        notes: list[str] | None = None,
        welcome_option: WelcomeOption | None = None,
        is_fallback: bool = False,
    ) -> Recommendation:
        product = MembershipProduct.PAY_AS_YOU_GO
        admission = ctx.admission or self.pricer.regular_admission_breakdown(ctx.plan)
        logger.info(f"Recommended Pay-As-You-Go: total {admission.total}")
        return Recommendation(
            product=product,
            label=self.catalog.label_for(product),
            breakdown=tuple(admission.items()),
            total_cost=admission.total,
            regular_admission_cost=admission.total,
            family_size=ctx.family_size,
            priced_family_size=ctx.family_size,
            primary_venue=ctx.primary_venue,
            total_visits=ctx.total_visits,
            visits_by_venue=ctx.visits_by_venue,
            evaluations=tuple(ctx.evaluations),
            welcome_option=welcome_option,
            purchase_link=self.catalog.purchase_link_for(product),
            notes=tuple(notes or ()),
            is_fallback=is_fallback,
        )

    def _fallback(self, plan: VisitPlan) -> Recommendation:
        try:
            ctx = self._build_context(plan.clamped(self.catalog.constraints))
            empty = self._empty_result(ctx)
            if empty is not None:
                return empty.model_copy(update={"is_fallback": True})
            ctx.admission = self.pricer.regular_admission_breakdown(ctx.plan)
            return self._pay_as_you_go(
                ctx,
                notes=["Membership comparison is unavailable; showing regular admission"],
                is_fallback=True,
            )
        except Exception:
            logger.exception("Regular admission fallback failed")
            return Recommendation.nothing_to_recommend(RecommendationStatus.UNAVAILABLE).model_copy(
                update={"is_fallback": True}
            )

    # ------------------------------------------------------------------ #
    #  Evaluation records                                                 #
    # ------------------------------------------------------------------ #

    def _welcome_evaluation(self, welcome: WelcomeOption | None) -> ProductEvaluation:
        product = MembershipProduct.WELCOME
        if welcome is None:
            return ProductEvaluation(
                product=product,
                label=self.catalog.label_for(product),
                eligible=False,
                reason="Requires a current NC or SC EBT or WIC card",
                purchase_link=self.catalog.purchase_link_for(product),
            )
        return ProductEvaluation(
            product=product,
            label=welcome.label,
            eligible=True,
            priced_family_size=welcome.people_included,
            base_price=welcome.base_price,
            total_cost=welcome.total_cost,
            purchase_link=welcome.purchase_link,
        )

    def _pay_as_you_go_evaluation(self, ctx: _PlanContext) -> ProductEvaluation:
        product = MembershipProduct.PAY_AS_YOU_GO
        return ProductEvaluation(
            product=product,
            label=self.catalog.label_for(product),
            eligible=True,
            priced_family_size=ctx.family_size,
            base_price=ZERO,
            total_cost=ctx.regular_admission_cost,
            purchase_link=self.catalog.purchase_link_for(product),
        )


# Singleton
recommendation_engine = RecommendationEngine()
