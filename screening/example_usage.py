"""
Example usage of the candidate screening system.

Run this file to see the system in action:
    python -m screening.example_usage

Without OPENAI_API_KEY every candidate goes through the local fallback parser.
"""

import os
import logging
from screening import process, CandidateData, JobDescription

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Sample job description
JOB = JobDescription(
    title="Senior Frontend Engineer",
    min_experience=5,
    education_level="Bachelor",
    mandatory_skills=["React", "TypeScript", "Tailwind"],
    optional_skills=["GraphQL", "Next.js"],
    certifications=["AWS Certified Developer"],
)

# Sample candidates
CANDIDATES = [
    CandidateData(
        id="1",
        name="Alice Smith",
        raw_text=(
            "Alice Smith. 6 years experience in React and TypeScript. Bachelor of Science in CS. "
            "Skills: React, TypeScript, Tailwind, GraphQL. Cert: AWS Certified Developer."
        ),
        file_name="alice_resume.pdf",
    ),
    CandidateData(
        id="2",
        name="Bob Jones",
        raw_text=(
            "Bob Jones. Frontend developer with 12+ yrs of experience. Master of Science, "
            "Computer Engineering. Skills: React, JavaScript, Next.js."
        ),
    ),
    CandidateData(
        id="3",
        name="",
        raw_text=(
            "Associate degree in web design. 3 years experience building sites with "
            "React, TypeScript and Tailwind."
        ),
        file_name="carol_cv.pdf",
    ),
    CandidateData(id="4", name="Empty Upload", raw_text="   "),
]


def example_screening():
    """Example 1: Screen and rank a batch of candidates."""
    print("\n" + "="*80)
    print("EXAMPLE 1: Candidate Screening")
    print("="*80)

    result = process(CANDIDATES, JOB)

    print(f"\n📊 RANKING ({result.candidates_processed} candidates)")
    print(f"{'='*80}")
    for i, candidate in enumerate(result.candidates, 1):
        score = candidate.score
        status = "QUALIFIED" if score.is_qualified else f"MISSING {', '.join(score.missing_mandatory_skills)}"
        print(f"\n#{i} {candidate.name} - {score.total_score} points ({status})")
        print(f"  Mandatory={score.mandatory_skills_score}, Optional={score.optional_skills_score}, "
              f"Exp={score.experience_score}, Edu={score.education_score}, "
              f"Cert={score.certification_score}")
        print(f"  Extracted: {candidate.experience_years} years, {candidate.education}, "
              f"skills={', '.join(candidate.skills_found) or '-'}"
              f"{' (fallback)' if candidate.used_fallback else ''}")

    if result.fallback_used:
        print("\n⚠️  Local fallback parser was used; results may be less accurate.")

    print(f"{'='*80}\n")


def example_determinism():
    """Example 2: Demonstrate determinism."""
    print("\n" + "="*80)
    print("EXAMPLE 2: Determinism Test")
    print("="*80)

    print("\nRunning the same batch 3 times to verify determinism...")

    orderings = []
    for i in range(3):
        result = process(CANDIDATES, JOB)
        ordering = [(c.id, c.score.total_score) for c in result.candidates]
        orderings.append(ordering)
        print(f"  Run {i+1}: {ordering}")

    if all(o == orderings[0] for o in orderings):
        print("\n✅ DETERMINISTIC: All runs produced the same ranking")
    else:
        print("\n⚠️  WARNING: Rankings varied")
        print("   Note: LLM extraction may vary slightly even with temperature=0")

    print(f"{'='*80}\n")


def example_empty_batch():
    """Example 3: A batch with no resume text."""
    result = process([CandidateData(id="x", name="Nobody", raw_text="")], JOB)
    print(f"Empty batch: {result.error}")


def main():
    """Run all examples."""
    if not os.getenv("OPENAI_API_KEY"):
        print("ℹ️  OPENAI_API_KEY not set - using the local fallback parser only")

    print("\n" + "="*80)
    print("CANDIDATE SCREENING SYSTEM - EXAMPLES")
    print("="*80)

    example_screening()
    example_determinism()
    example_empty_batch()


if __name__ == "__main__":
    main()
