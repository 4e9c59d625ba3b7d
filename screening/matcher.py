"""
Main Matcher Module

Orchestrates the complete screening process:
1. Extract structured data per candidate (LLM, with deterministic fallback)
2. Calculate deterministic scores
3. Rank candidates and report whether the fallback was used
"""

import asyncio
import logging
from typing import Optional, Sequence
from .config import NO_VALID_CANDIDATES_MESSAGE, get_settings
from .llm_extractor import LLMCandidateExtractor
from .models import CandidateData, JobDescription, ScreeningResult, Settings
from .orchestrator import CandidateExtractor, extract_all
from .ranker import rank_candidates, score_candidate

logger = logging.getLogger(__name__)


def build_default_extractor(settings: Settings) -> LLMCandidateExtractor:
    return LLMCandidateExtractor(api_key=settings.openai_api_key, model_name=settings.model_name)


def _check_unique_ids(candidates: Sequence[CandidateData]) -> None:
    seen = set()
    for candidate in candidates:
        if candidate.id in seen:
            raise ValueError(f"Duplicate candidate id: {candidate.id}")
        seen.add(candidate.id)


async def screen_candidates(
    candidates: Sequence[CandidateData],
    job: JobDescription,
    extractor: Optional[CandidateExtractor] = None,
    settings: Optional[Settings] = None,
) -> ScreeningResult:
    """
    Screen a batch of candidates against a job description.

    This is the main entry point for the screening system. It:
    1. Drops candidates with blank resume text
    2. Extracts attributes for the rest (concurrently, fallback per candidate)
    3. Scores and ranks them, highest total first

    Args:
        candidates: Candidates in caller order, with unique ids
        job: Job description
        extractor: Primary extractor (defaults to the LLM extractor from settings)
        settings: Runtime settings (defaults to environment)

    Returns:
        ScreeningResult. When no candidate has resume text, the result has no
        candidates and ``error`` carries a descriptive message; nothing is
        extracted or scored.

    Raises:
        ValueError: If candidate ids are not unique
        TimeoutError: If extraction exceeds settings.batch_timeout_seconds

    Example:
        >>> result = await screen_candidates(candidates, job)
        >>> for c in result.candidates:
        >>>     print(c.name, c.score.total_score)
    """
    _check_unique_ids(candidates)

    valid = [c for c in candidates if c.has_text]
    if not valid:
        logger.warning("No candidates with resume text to process")
        return ScreeningResult(error=NO_VALID_CANDIDATES_MESSAGE)

    settings = settings or get_settings()
    if extractor is None:
        extractor = build_default_extractor(settings)

    logger.info(f"Screening {len(valid)} candidate(s) for '{job.title}'")

    # Step 1: Extract
    extraction = extract_all(valid, job, extractor, settings)
    if settings.batch_timeout_seconds:
        try:
            extracted = await asyncio.wait_for(extraction, timeout=settings.batch_timeout_seconds)
        except asyncio.TimeoutError:
            raise TimeoutError(
                f"Candidate extraction did not finish within {settings.batch_timeout_seconds} seconds"
            )
    else:
        extracted = await extraction

    # Step 2: Score
    scored = [score_candidate(c, job) for c in extracted]

    # Step 3: Rank
    ranked = rank_candidates(scored)

    fallback_used = any(c.used_fallback for c in ranked)
    if fallback_used:
        logger.warning("Fallback extraction was used for at least one candidate; results may be less accurate")

    return ScreeningResult(
        candidates=ranked,
        fallback_used=fallback_used,
        candidates_processed=len(ranked),
    )


def process(
    candidates: Sequence[CandidateData],
    job: JobDescription,
    extractor: Optional[CandidateExtractor] = None,
    settings: Optional[Settings] = None,
) -> ScreeningResult:
    """Synchronous wrapper around screen_candidates for scripts and tests."""
    return asyncio.run(screen_candidates(candidates, job, extractor, settings))
