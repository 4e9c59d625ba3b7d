"""
Deterministic Scoring Engine

All scoring functions are deterministic - same inputs produce same outputs.
No AI/LLM is used in this module.
"""

import logging
from typing import List, Tuple
from .config import SCORING_POINTS, EXPERIENCE_YEARS_CAP, EDUCATION_SCORES
from .models import ExtractedCandidate, JobDescription, ScoreBreakdown, education_rank
from .vocabulary import term_key

logger = logging.getLogger(__name__)


def calculate_mandatory_skills_score(
    mandatory_skills: List[str],
    candidate_skills: List[str]
) -> Tuple[int, List[str]]:
    """
    Calculate mandatory skills points and list the missing ones.

    Formula: 20 points per mandatory skill present. Points are earned per
    skill; qualification is decided separately from the missing list.

    Args:
        mandatory_skills: Job's mandatory skills
        candidate_skills: Skills found for the candidate

    Returns:
        (points, missing mandatory skills in job order)
    """
    candidate_set = set(term_key(s) for s in candidate_skills)

    matched = [s for s in mandatory_skills if term_key(s) in candidate_set]
    missing = [s for s in mandatory_skills if term_key(s) not in candidate_set]
    score = len(matched) * SCORING_POINTS["mandatory_skill"]

    logger.debug(f"Mandatory skills: {len(matched)}/{len(mandatory_skills)} = {score} points")
    if missing:
        logger.debug(f"Missing mandatory skills: {missing}")
    return score, missing


def calculate_optional_skills_score(
    optional_skills: List[str],
    candidate_skills: List[str]
) -> int:
    """10 points per optional skill present."""
    candidate_set = set(term_key(s) for s in candidate_skills)
    matched = [s for s in optional_skills if term_key(s) in candidate_set]
    score = len(matched) * SCORING_POINTS["optional_skill"]
    logger.debug(f"Optional skills: {len(matched)}/{len(optional_skills)} = {score} points")
    return score


def calculate_experience_score(candidate_years: int) -> int:
    """
    Calculate experience points.

    Formula: 5 points per year, credit capped at 10 years (max 50).
    Negative years count as 0.
    """
    credited_years = min(max(int(candidate_years), 0), EXPERIENCE_YEARS_CAP)
    score = credited_years * SCORING_POINTS["experience_year"]
    logger.debug(f"Experience: {candidate_years} years ({credited_years} credited) = {score} points")
    return score


def calculate_education_score(
    required_level: str,
    candidate_level: str
) -> int:
    """
    Calculate education points.

    Formula:
    - Candidate tier >= required tier: 20 (flat, exceeding earns nothing extra)
    - Candidate tier < required tier: 5

    Unknown levels rank as the lowest tier.
    """
    required_rank = education_rank(required_level)
    candidate_rank = education_rank(candidate_level)

    if candidate_rank >= required_rank:
        score = EDUCATION_SCORES["meets_requirement"]
        logger.debug(f"Education level: {candidate_level} >= {required_level}, score = {score}")
    else:
        score = EDUCATION_SCORES["below_requirement"]
        logger.debug(f"Education level: {candidate_level} below {required_level}, score = {score}")
    return score


def calculate_certification_score(
    certifications: List[str],
    candidate_certifications: List[str]
) -> int:
    """10 points per required certification held."""
    candidate_set = set(term_key(c) for c in candidate_certifications)
    matched = [c for c in certifications if term_key(c) in candidate_set]
    score = len(matched) * SCORING_POINTS["certification"]
    logger.debug(f"Certifications: {len(matched)}/{len(certifications)} = {score} points")
    return score


def calculate_score(
    candidate: ExtractedCandidate,
    job: JobDescription
) -> ScoreBreakdown:
    """
    Calculate the full score breakdown for one candidate.

    The candidate is qualified only if every mandatory skill was found,
    regardless of the total.

    Args:
        candidate: Extracted candidate
        job: Job description

    Returns:
        ScoreBreakdown with all sub-scores, total and qualification verdict
    """
    mandatory_score, missing = calculate_mandatory_skills_score(job.mandatory_skills, candidate.skills_found)
    optional_score = calculate_optional_skills_score(job.optional_skills, candidate.skills_found)
    experience_score = calculate_experience_score(candidate.experience_years)
    education_score = calculate_education_score(job.education_level, candidate.education)
    certification_score = calculate_certification_score(job.certifications, candidate.certifications_found)

    total_score = (
        mandatory_score +
        optional_score +
        experience_score +
        education_score +
        certification_score
    )
    is_qualified = not missing

    logger.info(
        f"Candidate {candidate.id}: total score {total_score} "
        f"({'qualified' if is_qualified else 'not qualified'})"
    )

    return ScoreBreakdown(
        mandatory_skills_score=mandatory_score,
        optional_skills_score=optional_score,
        experience_score=experience_score,
        education_score=education_score,
        certification_score=certification_score,
        total_score=total_score,
        is_qualified=is_qualified,
        missing_mandatory_skills=missing,
    )
