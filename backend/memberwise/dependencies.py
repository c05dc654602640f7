from functools import lru_cache

from memberwise.config import build_catalog, settings
from memberwise.services.recommendation.config import EngineOptions
from memberwise.services.recommendation.engine import RecommendationEngine


@lru_cache
def get_recommendation_engine() -> RecommendationEngine:
    """Engine built once from settings; override in tests via ``app.dependency_overrides``."""
    options = EngineOptions(
        max_savings_percentage=settings.max_savings_percentage,
        eligibility_discount_in_comparison=settings.eligibility_discount_in_comparison,
    )
    return RecommendationEngine(catalog=build_catalog(settings), options=options)
