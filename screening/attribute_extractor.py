"""
Fallback Attribute Extraction

Deterministic, pattern-based parsing of raw resume text. Used whenever the
LLM extractor is not configured or fails for a candidate. No I/O, no AI.
"""

import logging
import re
from typing import List

from .config import EXTRACTION_CONFIG
from .models import CandidateAttributes, JobDescription, detect_education
from .vocabulary import find_terms

logger = logging.getLogger(__name__)

_YEARS_MENTION = re.compile(
    r"(?<![\d.])(\d{1,%d}(?:\.\d+)?)\s*\+?[\s-]*(?:years?|yrs?)\b" % EXTRACTION_CONFIG["max_experience_digits"],
    re.IGNORECASE,
)
_EXPERIENCE_WORD = re.compile(r"\bexp(?:erience[ds]?)?\b", re.IGNORECASE)
_CLAUSE_BREAK = re.compile(r"[.;|\n]")


def find_experience_mentions(text: str) -> List[int]:
    """
    Find every "N years" mention that sits near an experience keyword.

    A mention counts when "experience"/"exp" appears within the configured
    window before or after it and inside the same clause, e.g.
    "6 years experience", "6+ yrs exp", "Experience: 6 years". Clauses end at
    ".", ";", "|" or a line break, so "Age: 45 years. Experience: 2 years"
    counts only the 2.

    Args:
        text: Raw resume text

    Returns:
        Whole years for each counted mention, in text order
    """
    window = EXTRACTION_CONFIG["experience_proximity_chars"]
    mentions = []
    for match in _YEARS_MENTION.finditer(text):
        before = text[max(0, match.start() - window):match.start()]
        after = text[match.end():match.end() + window]
        before = _CLAUSE_BREAK.split(before)[-1]
        after = _CLAUSE_BREAK.split(after)[0]
        if _EXPERIENCE_WORD.search(before) or _EXPERIENCE_WORD.search(after):
            mentions.append(int(float(match.group(1))))
    return mentions


def extract_experience_years(text: str) -> int:
    """Largest counted experience mention, 0 when there is none."""
    mentions = find_experience_mentions(text)
    if not mentions:
        return 0
    years = max(mentions)
    logger.debug(f"Experience mentions {mentions}, using {years}")
    return years


def extract_education_level(text: str) -> str:
    """Highest degree tier whose keywords appear in text."""
    return detect_education(text)


def extract_attributes(raw_text: str, job: JobDescription) -> CandidateAttributes:
    """
    Extract candidate attributes from raw resume text.

    The job supplies the skill and certification vocabularies; nothing outside
    them is reported. Never raises: unreadable input yields the conservative
    defaults (0 years, lowest education tier, no skills, no certifications).

    Args:
        raw_text: Unstructured resume text
        job: Job description whose vocabularies are searched for

    Returns:
        CandidateAttributes without a name
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        return CandidateAttributes()

    attributes = CandidateAttributes(
        experience_years=extract_experience_years(raw_text),
        education=extract_education_level(raw_text),
        skills_found=find_terms(raw_text, job.skill_vocabulary),
        certifications_found=find_terms(raw_text, job.certifications),
    )
    logger.debug(
        f"Fallback extraction: {attributes.experience_years} years, {attributes.education}, "
        f"{len(attributes.skills_found)} skills, {len(attributes.certifications_found)} certifications"
    )
    return attributes
