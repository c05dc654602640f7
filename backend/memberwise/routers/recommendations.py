"""Recommendation router - membership comparison for a visit plan."""

from fastapi import APIRouter, Depends, Query

from memberwise.data.catalog import Venue
from memberwise.dependencies import get_recommendation_engine
from memberwise.schemas.recommendation import Recommendation, WelcomeOption, WelcomeSingleVisit
from memberwise.schemas.visit_plan import VisitPlan
from memberwise.services.recommendation.engine import RecommendationEngine

router = APIRouter()


@router.post("", response_model=Recommendation)
async def recommend(
    plan: VisitPlan,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """Cheapest way to cover the planned visits, fully itemized."""
    return engine.recommend(plan)


@router.post("/admission")
async def regular_admission(
    plan: VisitPlan,
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """Pay-per-visit baseline split by venue plus parking."""
    plan = plan.clamped(engine.catalog.constraints)
    breakdown = engine.pricer.regular_admission_breakdown(plan)
    return {
        "family_size": engine.pricer.family_size(plan),
        "primary_venue": engine.pricer.determine_primary_venue(plan).value,
        **breakdown.to_dict(),
    }


@router.post("/welcome", response_model=WelcomeOption)
async def welcome_option(
    plan: VisitPlan,
    venue: Venue | None = Query(None),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    """Welcome Program membership priced for the plan (default venue: the primary one)."""
    plan = plan.clamped(engine.catalog.constraints)
    return engine.discounts.compute_welcome_program_pricing(plan, venue)


@router.post("/welcome/single-visit", response_model=WelcomeSingleVisit)
async def welcome_single_visit(
    plan: VisitPlan,
    venue: Venue = Query(...),
    engine: RecommendationEngine = Depends(get_recommendation_engine),
):
    plan = plan.clamped(engine.catalog.constraints)
    return engine.discounts.compute_welcome_single_visit_pricing(plan, venue)
