"""Candidate ranking."""

import logging
from typing import List, Sequence

from .models import ExtractedCandidate, JobDescription, RankedCandidate
from .scoring_engine import calculate_score

logger = logging.getLogger(__name__)


def score_candidate(candidate: ExtractedCandidate, job: JobDescription) -> RankedCandidate:
    """Attach a score breakdown to an extracted candidate."""
    return RankedCandidate(**candidate.model_dump(), score=calculate_score(candidate, job))


def rank_candidates(scored: Sequence[RankedCandidate]) -> List[RankedCandidate]:
    """
    Order candidates by total score, highest first.

    The sort is stable: equal totals keep their input order. Qualified and
    unqualified candidates are ranked together.
    """
    ranked = sorted(scored, key=lambda c: c.score.total_score, reverse=True)
    if ranked:
        logger.info(f"Ranked {len(ranked)} candidate(s), top score {ranked[0].score.total_score}")
    return ranked
