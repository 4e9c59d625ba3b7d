from __future__ import annotations

import math
import re
from pathlib import PurePath
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from .config import (
    CONCURRENCY_CONFIG,
    DEFAULT_EDUCATION,
    DEGREE_HIERARCHY,
    DEGREE_KEYWORDS,
    LLM_CONFIG,
)
from .vocabulary import dedupe_terms, term_key


DEGREE_PATTERNS = [
    (level, re.compile(r"(?<!\w)(?:" + "|".join(patterns) + r")(?!\w)", re.IGNORECASE))
    for level, patterns in DEGREE_KEYWORDS
]


def detect_education(text: str) -> str:
    """Highest degree tier whose keywords appear in text, else the lowest tier."""
    for level, pattern in DEGREE_PATTERNS:
        if pattern.search(text):
            return level
    return DEFAULT_EDUCATION


def normalize_education(value: Any) -> str:
    """Map a degree name onto the fixed scale; unknown values become the lowest tier."""
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_EDUCATION
    cleaned = re.sub(r"\s+", " ", value.strip()).lower()
    for level in DEGREE_HIERARCHY:
        if cleaned == level.lower():
            return level
    return detect_education(cleaned)


def education_rank(value: Any) -> int:
    """Numeric tier (1-5) of an education level."""
    return DEGREE_HIERARCHY[normalize_education(value)]


def coerce_years(value: Any) -> int:
    """Whole, non-negative years from whatever an extractor returned."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, str):
        match = re.search(r"-?\d+(?:\.\d+)?", value)
        if not match:
            return 0
        value = match.group(0)
    try:
        years = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(years) or years <= 0:
        return 0
    if math.isinf(years):
        return 0
    return int(years)


class JobDescription(BaseModel):
    """Job requirement profile. Shared read-only across concurrent extractions."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    min_experience: int = Field(default=0, ge=0)
    education_level: str = DEFAULT_EDUCATION
    mandatory_skills: List[str] = Field(default_factory=list)
    optional_skills: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)

    @field_validator("education_level", mode="before")
    @classmethod
    def _normalize_education(cls, v: Any) -> str:
        return normalize_education(v)

    @field_validator("mandatory_skills", "optional_skills", "certifications", mode="before")
    @classmethod
    def _dedupe(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple, set)):
            raise ValueError("expected a list of strings")
        return dedupe_terms(v)

    @field_validator("optional_skills")
    @classmethod
    def _drop_mandatory_overlap(cls, v: List[str], info: ValidationInfo) -> List[str]:
        """A skill listed as both mandatory and optional only counts as mandatory."""
        mandatory = {term_key(s) for s in info.data.get("mandatory_skills", [])}
        return [s for s in v if term_key(s) not in mandatory]

    @property
    def skill_vocabulary(self) -> List[str]:
        """Mandatory followed by optional skills, without case-insensitive duplicates."""
        return dedupe_terms(list(self.mandatory_skills) + list(self.optional_skills))


class CandidateData(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    raw_text: str = ""
    file_name: Optional[str] = None

    @property
    def has_text(self) -> bool:
        return bool(self.raw_text.strip())

    @property
    def display_name(self) -> str:
        if self.name.strip():
            return self.name.strip()
        if self.file_name and self.file_name.strip():
            return PurePath(self.file_name.strip()).stem
        return self.id


class CandidateAttributes(BaseModel):
    """Fields produced by an extractor; id and name are attached by the orchestrator."""

    experience_years: int = 0
    education: str = DEFAULT_EDUCATION
    skills_found: List[str] = Field(default_factory=list)
    certifications_found: List[str] = Field(default_factory=list)
    name: Optional[str] = None

    @field_validator("experience_years", mode="before")
    @classmethod
    def _coerce_years(cls, v: Any) -> int:
        return coerce_years(v)

    @field_validator("education", mode="before")
    @classmethod
    def _normalize_education(cls, v: Any) -> str:
        return normalize_education(v)

    @field_validator("skills_found", "certifications_found", mode="before")
    @classmethod
    def _dedupe(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple, set)):
            raise ValueError("expected a list of strings")
        return dedupe_terms(v)

    @field_validator("name", mode="before")
    @classmethod
    def _clean_name(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()


class ExtractedCandidate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    experience_years: int = Field(default=0, ge=0)
    education: str = DEFAULT_EDUCATION
    skills_found: List[str] = Field(default_factory=list)
    certifications_found: List[str] = Field(default_factory=list)
    used_fallback: bool = False


class ScoreBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    mandatory_skills_score: int = Field(ge=0)
    optional_skills_score: int = Field(ge=0)
    experience_score: int = Field(ge=0)
    education_score: int = Field(ge=0)
    certification_score: int = Field(ge=0)
    total_score: int = Field(ge=0)
    is_qualified: bool
    missing_mandatory_skills: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_consistency(self) -> "ScoreBreakdown":
        parts = (
            self.mandatory_skills_score
            + self.optional_skills_score
            + self.experience_score
            + self.education_score
            + self.certification_score
        )
        if self.total_score != parts:
            raise ValueError(f"total_score {self.total_score} does not equal sub-score sum {parts}")
        if self.is_qualified and self.missing_mandatory_skills:
            raise ValueError("candidate missing mandatory skills cannot be qualified")
        return self


class RankedCandidate(ExtractedCandidate):
    score: ScoreBreakdown


class ScreeningResult(BaseModel):
    candidates: List[RankedCandidate] = Field(default_factory=list)
    fallback_used: bool = False
    candidates_processed: int = 0
    error: Optional[str] = None

    @property
    def has_candidates(self) -> bool:
        return bool(self.candidates)


class Settings(BaseModel):
    model_config = ConfigDict(protected_namespaces=())
    openai_api_key: Optional[str] = None
    model_name: str = LLM_CONFIG["model"]
    max_concurrent_extractions: int = Field(default=CONCURRENCY_CONFIG["max_concurrent_extractions"], ge=1)
    extraction_timeout_seconds: float = Field(default=CONCURRENCY_CONFIG["extraction_timeout_seconds"], gt=0)
    batch_timeout_seconds: Optional[float] = Field(default=None, gt=0)
