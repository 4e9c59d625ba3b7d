"""
LLM Extraction Module

Uses PhiData + an OpenAI chat model to extract structured candidate data from
resume text. This is the primary extractor; the orchestrator falls back to
the deterministic attribute extractor whenever it is unavailable or fails.
"""

import json
import re
import logging
from typing import Dict, Any, Optional
from phi.agent import Agent
from phi.model.openai import OpenAIChat
from .config import DEGREE_HIERARCHY, LLM_CONFIG
from .models import CandidateAttributes, JobDescription

logger = logging.getLogger(__name__)


def get_model_config(model_name: str, temperature: float = 0, api_key: Optional[str] = None) -> Dict[str, Any]:
    """
    Get model configuration with temperature support check.
    Some models don't support custom temperature.
    """
    config = {"id": model_name}
    if api_key:
        config["api_key"] = api_key

    # Models that don't support temperature customization
    models_without_temperature = ["o1", "o1-mini", "o1-preview", "gpt-5-mini", "gpt-5"]

    model_lower = model_name.lower()
    supports_temperature = not any(no_temp in model_lower for no_temp in models_without_temperature)

    if supports_temperature:
        config["temperature"] = temperature

    # JSON mode support
    if "gpt-4" in model_lower:
        config["response_format"] = {"type": "json_object"}

    return config


def extract_json_from_response(text: str) -> Optional[Dict[str, Any]]:
    """Extract JSON from LLM response, handling markdown and other formatting."""
    if not text:
        return None

    # Remove markdown code fences
    if '```json' in text:
        match = re.search(r'```json\s*\n?(.*?)\n?```', text, re.DOTALL)
        if match:
            text = match.group(1).strip()
    elif '```' in text:
        match = re.search(r'```\s*\n?(.*?)\n?```', text, re.DOTALL)
        if match:
            text = match.group(1).strip()

    # Try to find JSON object
    json_match = re.search(r'\{[^{}]*(?:\{[^{}]*\}[^{}]*)*\}', text, re.DOTALL)
    if json_match:
        try:
            return json.loads(json_match.group(0))
        except json.JSONDecodeError:
            pass

    # Try direct parse
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def response_text(response: Any) -> str:
    """Pull the text content out of an agent run response."""
    if hasattr(response, 'content'):
        return str(response.content)
    if hasattr(response, 'messages') and response.messages:
        last_msg = response.messages[-1]
        return str(last_msg.content if hasattr(last_msg, 'content') else last_msg)
    return str(response)


def build_extraction_agent(model_name: str = None, api_key: Optional[str] = None) -> Agent:
    """Build PhiData agent for candidate extraction."""
    model_name = model_name or LLM_CONFIG["model"]
    model_config = get_model_config(model_name, temperature=LLM_CONFIG["temperature"], api_key=api_key)
    levels = ", ".join(DEGREE_HIERARCHY)

    return Agent(
        name="Candidate Extractor",
        role="Extract structured candidate attributes from resume text",
        model=OpenAIChat(**model_config),
        instructions=[
            "Extract information in JSON format with no additional text or markdown.",
            "Return ONLY a valid JSON object with these keys:",
            "- name: candidate's full name, or empty string if not found",
            "- experience_years: integer (total years of professional experience, 0 if unknown)",
            f"- education: string (highest degree, one of: {levels})",
            "- skills_found: array of skills from the provided skill list that the resume shows",
            "- certifications_found: array of certifications from the provided list that the resume shows",
            "",
            "Only report skills and certifications that appear in the provided lists, spelled as listed.",
            "CRITICAL: Return ONLY the JSON object, no explanations.",
        ],
        show_tool_calls=False,
        markdown=False,
    )


def build_extraction_prompt(raw_text: str, job: JobDescription) -> str:
    skills = ", ".join(job.skill_vocabulary) or "(none)"
    certifications = ", ".join(job.certifications) or "(none)"
    return f"""Extract the candidate's attributes for the role "{job.title}" and return ONLY a JSON object.

Skill list: {skills}
Certification list: {certifications}

Keys:
- name: string
- experience_years: integer
- education: one of {", ".join(DEGREE_HIERARCHY)}
- skills_found: array drawn from the skill list
- certifications_found: array drawn from the certification list

Resume:
{raw_text}
"""


class LLMCandidateExtractor:
    """
    Primary candidate extractor backed by an OpenAI chat model.

    Availability is declared up front: without an API key the extractor
    reports itself unavailable and the orchestrator routes every candidate
    through the fallback path instead of attempting calls.
    """

    def __init__(self, api_key: Optional[str] = None, model_name: str = None, max_retries: int = None):
        self.api_key = api_key
        self.model_name = model_name or LLM_CONFIG["model"]
        self.max_retries = max_retries or LLM_CONFIG["max_retries"]

    def is_available(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    def extract(self, raw_text: str, candidate_id: str, job: JobDescription) -> CandidateAttributes:
        """
        Extract candidate attributes from resume text using the LLM.

        Args:
            raw_text: Full resume text
            candidate_id: Caller-assigned candidate id (used for logging)
            job: Job description supplying the skill/certification lists

        Returns:
            Validated CandidateAttributes

        Raises:
            ValueError: If the extractor is not configured or every attempt fails
        """
        if not self.is_available():
            raise ValueError("LLM extractor is not configured (missing API key)")

        agent = build_extraction_agent(self.model_name, self.api_key)
        prompt = build_extraction_prompt(raw_text, job)

        for attempt in range(self.max_retries):
            try:
                logger.info(f"Candidate {candidate_id}: extraction attempt {attempt + 1}/{self.max_retries}")

                text = response_text(agent.run(prompt))
                logger.debug(f"Raw LLM response: {text[:500]}...")

                extracted_data = extract_json_from_response(text)
                if not extracted_data:
                    raise ValueError("Could not extract valid JSON from LLM response")

                attributes = CandidateAttributes(**extracted_data)
                logger.info(f"Candidate {candidate_id}: extraction successful")
                return attributes

            except Exception as e:
                logger.warning(f"Candidate {candidate_id}: extraction attempt {attempt + 1} failed: {e}")
                if attempt == self.max_retries - 1:
                    raise ValueError(f"Failed to extract candidate data after {self.max_retries} attempts: {e}")

        raise ValueError("Extraction failed")
