"""
Configuration for the candidate screening engine.
Adjust point values and extraction parameters here.
"""

import os

# Points awarded per matched item
SCORING_POINTS = {
    "mandatory_skill": 20,
    "optional_skill": 10,
    "experience_year": 5,
    "certification": 10,
}

# Years of experience beyond this earn no additional points
EXPERIENCE_YEARS_CAP = 10

# Education scoring (flat, not proportional to the gap)
EDUCATION_SCORES = {
    "meets_requirement": 20,
    "below_requirement": 5,
}

# Education degree hierarchy
DEGREE_HIERARCHY = {
    "High School": 1,
    "Associate": 2,
    "Bachelor": 3,
    "Master": 4,
    "PhD": 5,
}

DEFAULT_EDUCATION = "High School"

# Degree keyword patterns, checked from the highest tier down
DEGREE_KEYWORDS = [
    ("PhD", [r"ph\.?\s?d\.?", r"doctorate", r"doctoral"]),
    ("Master", [r"(?<!scrum )master(?:'?s)?", r"m\.s\.", r"ms(?!\s+(?:office|excel|word|sql|teams|access|project|outlook|powerpoint)\b)", r"msc", r"mba"]),
    ("Bachelor", [r"bachelor(?:'?s)?", r"b\.s\.", r"bs", r"bsc", r"b\.a\.", r"ba"]),
    ("Associate", [r"associate(?:'?s)?"]),
]

# Fallback extraction parameters
EXTRACTION_CONFIG = {
    "experience_proximity_chars": 40,  # Window around a "N years" mention
    "max_experience_digits": 2,
}

# LLM configuration
LLM_CONFIG = {
    "temperature": 0,  # For maximum consistency
    "model": "gpt-4o",  # Default model
    "max_retries": 3,
}

# Orchestrator defaults
CONCURRENCY_CONFIG = {
    "max_concurrent_extractions": 8,
    "extraction_timeout_seconds": 60.0,
}

# Skill normalization mappings
SKILL_NORMALIZATIONS = {
    "react.js": "React",
    "reactjs": "React",
    "react js": "React",
    "node.js": "Node.js",
    "nodejs": "Node.js",
    "next.js": "Next.js",
    "nextjs": "Next.js",
    "javascript": "JavaScript",
    "typescript": "TypeScript",
    "ts": "TypeScript",
    "tailwindcss": "Tailwind",
    "tailwind css": "Tailwind",
    "graphql": "GraphQL",
    "python3": "Python",
    "c++": "C++",
    "c#": "C#",
    "aws": "AWS",
    "amazon web services": "AWS",
    "azure": "Azure",
    "microsoft azure": "Azure",
    "google cloud": "GCP",
    "gcp": "GCP",
}

NO_VALID_CANDIDATES_MESSAGE = "Please add at least one candidate with resume text or upload a PDF."

FALLBACK_NOTICE = (
    "A local fallback parser was used because the AI extractor was unavailable or failed "
    "for at least one candidate; results may be less accurate. Set OPENAI_API_KEY to enable "
    "the AI extractor."
)


def _optional_float(value):
    if value is None or value.strip() == "":
        return None
    return float(value)


def get_settings():
    """Build runtime settings from environment variables."""
    from .models import Settings

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        model_name=os.getenv("OPENAI_MODEL", LLM_CONFIG["model"]),
        max_concurrent_extractions=int(
            os.getenv("MAX_CONCURRENT_EXTRACTIONS", str(CONCURRENCY_CONFIG["max_concurrent_extractions"]))
        ),
        extraction_timeout_seconds=float(
            os.getenv("EXTRACTION_TIMEOUT_SECONDS", str(CONCURRENCY_CONFIG["extraction_timeout_seconds"]))
        ),
        batch_timeout_seconds=_optional_float(os.getenv("BATCH_TIMEOUT_SECONDS")),
    )
