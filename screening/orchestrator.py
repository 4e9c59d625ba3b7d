"""
Extraction Orchestrator

Runs one extraction per candidate, concurrently. Each candidate first goes to
the primary extractor; on any failure (or when the primary extractor is not
configured) the deterministic attribute extractor takes over and the record is
flagged with used_fallback. Results come back in input order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

from .attribute_extractor import extract_attributes
from .models import CandidateAttributes, CandidateData, ExtractedCandidate, JobDescription, Settings
from .vocabulary import restrict_to_vocabulary

logger = logging.getLogger(__name__)


class CandidateExtractor(Protocol):
    def is_available(self) -> bool:
        """Whether the extractor is configured and may be called."""

    def extract(self, raw_text: str, candidate_id: str, job: JobDescription) -> CandidateAttributes:
        """Return extracted attributes or raise."""


def build_extracted_candidate(
    candidate: CandidateData,
    attributes: CandidateAttributes,
    job: JobDescription,
    used_fallback: bool,
) -> ExtractedCandidate:
    """Combine a candidate with its extracted attributes, constrained to the job's vocabularies."""
    name = candidate.name.strip() or attributes.name or candidate.display_name
    return ExtractedCandidate(
        id=candidate.id,
        name=name,
        experience_years=attributes.experience_years,
        education=attributes.education,
        skills_found=restrict_to_vocabulary(attributes.skills_found, job.skill_vocabulary),
        certifications_found=restrict_to_vocabulary(attributes.certifications_found, job.certifications),
        used_fallback=used_fallback,
    )


def fallback_extract(candidate: CandidateData, job: JobDescription) -> ExtractedCandidate:
    attributes = extract_attributes(candidate.raw_text, job)
    return build_extracted_candidate(candidate, attributes, job, used_fallback=True)


async def _extract_one(
    candidate: CandidateData,
    job: JobDescription,
    extractor: CandidateExtractor,
    semaphore: asyncio.Semaphore,
    timeout: float,
) -> ExtractedCandidate:
    await semaphore.acquire()
    call = asyncio.get_running_loop().run_in_executor(
        None, extractor.extract, candidate.raw_text, candidate.id, job
    )
    # A timed-out call keeps its worker thread, so the slot is held until the thread returns
    call.add_done_callback(lambda _: semaphore.release())

    try:
        attributes = await asyncio.wait_for(asyncio.shield(call), timeout=timeout)
        return build_extracted_candidate(candidate, attributes, job, used_fallback=False)
    except Exception as e:
        logger.warning(f"Primary extraction failed for candidate {candidate.id}, using fallback: {e!r}")
        return fallback_extract(candidate, job)


async def extract_all(
    candidates: Sequence[CandidateData],
    job: JobDescription,
    extractor: Optional[CandidateExtractor] = None,
    settings: Optional[Settings] = None,
) -> List[ExtractedCandidate]:
    """
    Extract every candidate with non-blank resume text.

    Args:
        candidates: Candidates in caller order
        job: Job description (read-only, shared by all tasks)
        extractor: Primary extractor; None means fallback only
        settings: Concurrency limit and per-candidate timeout

    Returns:
        One ExtractedCandidate per non-blank candidate, in input order
    """
    settings = settings or Settings()
    valid = [c for c in candidates if c.has_text]
    skipped = len(candidates) - len(valid)
    if skipped:
        logger.info(f"Skipping {skipped} candidate(s) with blank resume text")
    if not valid:
        return []

    if extractor is None or not extractor.is_available():
        logger.info(f"Primary extractor not configured, using fallback extraction for {len(valid)} candidate(s)")
        return [fallback_extract(c, job) for c in valid]

    semaphore = asyncio.Semaphore(settings.max_concurrent_extractions)
    results = await asyncio.gather(
        *[_extract_one(c, job, extractor, semaphore, settings.extraction_timeout_seconds) for c in valid]
    )

    fallback_count = sum(1 for r in results if r.used_fallback)
    logger.info(f"Extracted {len(results)} candidate(s), {fallback_count} via fallback")
    return list(results)
