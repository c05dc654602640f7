"""Candidate selection - cheapest fully-loaded cost wins, with deterministic tie-breaks."""

import logging
from decimal import Decimal

from memberwise.data.catalog import Venue
from memberwise.services.recommendation.candidates import MembershipCandidate
from memberwise.services.recommendation.config import EngineOptions, engine_options

logger = logging.getLogger(__name__)


class CandidateSelector:
    """Picks the winning membership and checks it against the per-visit baseline."""

    def __init__(self, options: EngineOptions = engine_options):
        self.options = options

    def rank_key(self, candidate: MembershipCandidate, position: int, primary_venue: Venue) -> tuple:
        """Lower sorts first: total, then bundle, then primary-venue anchor, then catalog order."""
        is_bundle = self.options.prefer_bundle_on_tie and candidate.product == self.options.bundle_product
        return (
            candidate.total_cost,
            0 if is_bundle else 1,
            0 if candidate.anchor_venue == primary_venue else 1,
            position,
        )

    def rank(self, candidates: list[MembershipCandidate], primary_venue: Venue) -> list[MembershipCandidate]:
        indexed = list(enumerate(candidates))
        indexed.sort(key=lambda pair: self.rank_key(pair[1], pair[0], primary_venue))
        return [c for _, c in indexed]

    def select(self, candidates: list[MembershipCandidate], primary_venue: Venue) -> MembershipCandidate | None:
        if not candidates:
            return None
        ranked = self.rank(candidates, primary_venue)
        best = ranked[0]
        logger.debug(
            f"Selected {best.product.value} at {best.total_cost} "
            f"(runner-up: {ranked[1].product.value if len(ranked) > 1 else 'none'})"
        )
        return best

    @staticmethod
    def pay_as_you_go_is_cheaper(candidate_total: Decimal, regular_admission_cost: Decimal) -> bool:
        """Strictly cheaper only; a tie keeps the membership."""
        return regular_admission_cost < candidate_total
