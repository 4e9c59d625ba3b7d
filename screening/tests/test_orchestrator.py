"""
Tests for the extraction orchestrator: fallback routing, failure isolation
and order preservation under concurrency.
"""

import asyncio
import threading
import time
import unittest
from screening.models import CandidateAttributes, CandidateData, JobDescription, Settings
from screening.orchestrator import build_extracted_candidate, extract_all


JOB = JobDescription(
    title="Senior Frontend Engineer",
    education_level="Bachelor",
    mandatory_skills=["React", "TypeScript"],
    optional_skills=["GraphQL"],
    certifications=["AWS Certified Developer"],
)


class FakeExtractor:
    """Primary extractor stand-in with configurable failures and delays."""

    def __init__(self, available=True, failing_ids=(), delays=None, payload=None):
        self.available = available
        self.failing_ids = set(failing_ids)
        self.delays = delays or {}
        self.payload = payload or {
            "experience_years": 7,
            "education": "Master",
            "skills_found": ["react", "TypeScript", "Docker"],
            "certifications_found": [],
            "name": "Extracted Name",
        }
        self.calls = []
        self._lock = threading.Lock()

    def is_available(self):
        return self.available

    def extract(self, raw_text, candidate_id, job):
        with self._lock:
            self.calls.append(candidate_id)
        time.sleep(self.delays.get(candidate_id, 0))
        if candidate_id in self.failing_ids:
            raise RuntimeError(f"extractor failed for {candidate_id}")
        return CandidateAttributes(**self.payload)


def make_candidates(*ids):
    return [
        CandidateData(id=i, name=f"Candidate {i}", raw_text="4 years experience. Skills: React, GraphQL.")
        for i in ids
    ]


class TestExtractAll(unittest.IsolatedAsyncioTestCase):
    """Test batch extraction."""

    async def test_primary_success(self):
        extractor = FakeExtractor()
        results = await extract_all(make_candidates("a", "b"), JOB, extractor, Settings())
        self.assertEqual([r.id for r in results], ["a", "b"])
        for r in results:
            self.assertFalse(r.used_fallback)
            self.assertEqual(r.experience_years, 7)
            self.assertEqual(r.education, "Master")
            # restricted to the job vocabulary, in job spelling
            self.assertEqual(r.skills_found, ["React", "TypeScript"])

    async def test_unavailable_extractor_is_never_called(self):
        extractor = FakeExtractor(available=False)
        results = await extract_all(make_candidates("a", "b", "c"), JOB, extractor, Settings())
        self.assertEqual(extractor.calls, [])
        self.assertTrue(all(r.used_fallback for r in results))
        self.assertEqual(results[0].experience_years, 4)
        self.assertEqual(results[0].skills_found, ["React", "GraphQL"])

    async def test_no_extractor_uses_fallback(self):
        results = await extract_all(make_candidates("a"), JOB, None, Settings())
        self.assertTrue(results[0].used_fallback)

    async def test_failure_isolation(self):
        """Test that one failing candidate does not affect the others."""
        extractor = FakeExtractor(failing_ids={"y"})
        results = await extract_all(make_candidates("x", "y", "z"), JOB, extractor, Settings())
        by_id = {r.id: r for r in results}
        self.assertFalse(by_id["x"].used_fallback)
        self.assertTrue(by_id["y"].used_fallback)
        self.assertFalse(by_id["z"].used_fallback)
        self.assertEqual(by_id["x"].experience_years, 7)
        self.assertEqual(by_id["y"].experience_years, 4)
        self.assertEqual(by_id["z"].experience_years, 7)

    async def test_order_preserved_regardless_of_completion(self):
        extractor = FakeExtractor(delays={"first": 0.3, "second": 0.1, "third": 0.0})
        results = await extract_all(make_candidates("first", "second", "third"), JOB, extractor, Settings())
        self.assertEqual([r.id for r in results], ["first", "second", "third"])

    async def test_timeout_falls_back(self):
        extractor = FakeExtractor(delays={"slow": 0.5})
        settings = Settings(extraction_timeout_seconds=0.05)
        results = await extract_all(make_candidates("fast", "slow"), JOB, extractor, settings)
        self.assertFalse(results[0].used_fallback)
        self.assertTrue(results[1].used_fallback)

    async def test_invalid_payload_falls_back(self):
        extractor = FakeExtractor(payload={"experience_years": 3, "skills_found": 17})
        results = await extract_all(make_candidates("a"), JOB, extractor, Settings())
        self.assertTrue(results[0].used_fallback)
        self.assertEqual(results[0].experience_years, 4)

    async def test_blank_candidates_are_skipped(self):
        extractor = FakeExtractor()
        candidates = [
            CandidateData(id="blank", raw_text="   "),
            CandidateData(id="real", raw_text="React developer"),
            CandidateData(id="empty", raw_text=""),
        ]
        results = await extract_all(candidates, JOB, extractor, Settings())
        self.assertEqual([r.id for r in results], ["real"])
        self.assertEqual(extractor.calls, ["real"])

    async def test_concurrency_limit(self):
        active = 0
        peak = 0
        lock = threading.Lock()

        class CountingExtractor(FakeExtractor):
            def extract(self, raw_text, candidate_id, job):
                nonlocal active, peak
                with lock:
                    active += 1
                    peak = max(peak, active)
                time.sleep(0.05)
                with lock:
                    active -= 1
                return CandidateAttributes()

        settings = Settings(max_concurrent_extractions=2)
        results = await extract_all(make_candidates(*"abcdef"), JOB, CountingExtractor(), settings)
        self.assertEqual(len(results), 6)
        self.assertLessEqual(peak, 2)

    async def test_concurrency_limit_holds_after_timeouts(self):
        """Test that a timed-out call keeps its slot until the extractor returns."""
        active = 0
        peak = 0
        lock = threading.Lock()

        class SlowExtractor(FakeExtractor):
            def extract(self, raw_text, candidate_id, job):
                nonlocal active, peak
                with lock:
                    active += 1
                    peak = max(peak, active)
                time.sleep(0.2)
                with lock:
                    active -= 1
                return CandidateAttributes()

        settings = Settings(max_concurrent_extractions=2, extraction_timeout_seconds=0.02)
        results = await extract_all(make_candidates(*"abcdef"), JOB, SlowExtractor(), settings)
        self.assertEqual([r.id for r in results], list("abcdef"))
        self.assertTrue(all(r.used_fallback for r in results))
        self.assertLessEqual(peak, 2)

    async def test_cancellation_propagates(self):
        extractor = FakeExtractor(delays={"a": 0.3})
        task = asyncio.ensure_future(extract_all(make_candidates("a"), JOB, extractor, Settings()))
        await asyncio.sleep(0.05)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task


class TestBuildExtractedCandidate(unittest.TestCase):
    """Test record assembly."""

    def test_caller_name_wins(self):
        candidate = CandidateData(id="1", name="Alice", raw_text="x")
        record = build_extracted_candidate(candidate, CandidateAttributes(name="A. Smith"), JOB, used_fallback=False)
        self.assertEqual(record.name, "Alice")
        self.assertEqual(record.id, "1")

    def test_name_from_extractor_then_file_name(self):
        unnamed = CandidateData(id="2", raw_text="x", file_name="bob_resume.pdf")
        record = build_extracted_candidate(unnamed, CandidateAttributes(name="Bob Jones"), JOB, used_fallback=False)
        self.assertEqual(record.name, "Bob Jones")
        record = build_extracted_candidate(unnamed, CandidateAttributes(), JOB, used_fallback=True)
        self.assertEqual(record.name, "bob_resume")
        self.assertTrue(record.used_fallback)


if __name__ == "__main__":
    unittest.main()
