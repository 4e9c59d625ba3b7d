from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator

from screening import __version__
from screening.config import FALLBACK_NOTICE, NO_VALID_CANDIDATES_MESSAGE, get_settings
from screening.matcher import screen_candidates
from screening.models import CandidateData, JobDescription, RankedCandidate, Settings
from screening.pdf_text import PdfExtractionError, decode_base64_pdf, extract_text_from_pdf_bytes


# Load environment from the working directory .env and one next to this file, if present
load_dotenv()
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("screening.api")

MAX_CANDIDATES_PER_REQUEST = 100


class CandidateInput(BaseModel):
    id: Optional[str] = Field(default=None, description="Caller-assigned id; generated if omitted")
    name: str = ""
    raw_text: str = ""
    file_name: Optional[str] = None
    pdf: Optional[str] = Field(
        default=None,
        description="Base64-encoded PDF content, used when raw_text is blank",
    )


class ScreeningRequest(BaseModel):
    job: JobDescription
    candidates: List[CandidateInput] = Field(default_factory=list)

    @field_validator("candidates")
    @classmethod
    def validate_candidates(cls, v: List[CandidateInput]) -> List[CandidateInput]:
        if len(v) == 0:
            raise ValueError("At least one candidate is required")
        if len(v) > MAX_CANDIDATES_PER_REQUEST:
            raise ValueError(f"A maximum of {MAX_CANDIDATES_PER_REQUEST} candidates is allowed")
        return v


class ScreeningResponse(BaseModel):
    candidates: List[RankedCandidate]
    fallback_used: bool
    fallback_notice: Optional[str] = None
    candidates_processed: int
    warnings: List[str] = Field(default_factory=list)
    processing_time: str
    request_id: str


def make_request_id() -> str:
    return uuid.uuid4().hex


def make_candidate_id() -> str:
    return uuid.uuid4().hex[:9]


def resolve_candidates(inputs: List[CandidateInput]) -> tuple[List[CandidateData], List[str]]:
    """Assign missing ids and turn PDF payloads into resume text."""
    candidates: List[CandidateData] = []
    warnings: List[str] = []
    for item in inputs:
        raw_text = item.raw_text
        if not raw_text.strip() and item.pdf:
            label = item.file_name or item.name or "resume"
            try:
                raw_text = extract_text_from_pdf_bytes(decode_base64_pdf(item.pdf))
            except PdfExtractionError as e:
                logger.warning(f"Failed to parse {label}: {e}")
                warnings.append(f"Failed to parse {label}")
        candidates.append(
            CandidateData(
                id=item.id or make_candidate_id(),
                name=item.name,
                raw_text=raw_text,
                file_name=item.file_name,
            )
        )
    return candidates, warnings


app = FastAPI(title="Candidate Screening API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"status": "ok", "version": __version__}


@app.post("/api/rank-candidates", response_model=ScreeningResponse)
async def rank_candidates_endpoint(
    request: ScreeningRequest,
    settings: Settings = Depends(get_settings),
):
    request_id = make_request_id()
    started = time.time()

    candidates, warnings = resolve_candidates(request.candidates)
    try:
        result = await screen_candidates(candidates, request.job, settings=settings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))

    if not result.has_candidates:
        raise HTTPException(status_code=400, detail=result.error or NO_VALID_CANDIDATES_MESSAGE)

    elapsed = time.time() - started
    logger.info(f"[{request_id}] ranked {result.candidates_processed} candidate(s) in {elapsed:.2f}s")

    return ScreeningResponse(
        candidates=result.candidates,
        fallback_used=result.fallback_used,
        fallback_notice=FALLBACK_NOTICE if result.fallback_used else None,
        candidates_processed=result.candidates_processed,
        warnings=warnings,
        processing_time=f"{elapsed:.2f}s",
        request_id=request_id,
    )
