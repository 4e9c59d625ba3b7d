"""
Deterministic Candidate Screening System

This package ranks resumes against a job requirement profile:
1. Extraction of structured candidate data (PhiData + OpenAI, with a
   deterministic pattern-based fallback)
2. Deterministic point-based scoring with a mandatory-skill qualification gate
3. Stable ranking by total score

Usage:
    from screening import process, CandidateData, JobDescription

    result = process(candidates, job)
    for candidate in result.candidates:
        print(f"{candidate.name}: {candidate.score.total_score}")
"""

from .matcher import process, screen_candidates
from .models import (
    CandidateData,
    ExtractedCandidate,
    JobDescription,
    RankedCandidate,
    ScoreBreakdown,
    ScreeningResult,
)
from .config import SCORING_POINTS

__all__ = [
    "process",
    "screen_candidates",
    "CandidateData",
    "ExtractedCandidate",
    "JobDescription",
    "RankedCandidate",
    "ScoreBreakdown",
    "ScreeningResult",
    "SCORING_POINTS",
]
__version__ = "1.0.0"
