from pydantic import Field
from typing import Optional, List
from datetime import datetime

from app.schemas.base import CamelModel
from app.schemas.answer import AnswerRecordIn, AnswerRecord
from app.schemas.score import Score, SectionResult
from app.schemas.mock_test import MockTestSummary, MockTestDetail
from app.schemas.response import Pagination

class ResultSubmit(CamelModel):
    test: int = Field(..., description="ID of the test being submitted")
    answers: List[AnswerRecordIn]
    time_taken: Optional[int] = Field(None, ge=0, description="Seconds spent on the test")

class ResultBase(CamelModel):
    id: int
    user_id: int
    test_id: int
    total_score: Score
    section_results: List[SectionResult] = []
    time_taken: int
    started_at: datetime
    submitted_at: datetime

class ResultSummary(ResultBase):
    test: Optional[MockTestSummary] = None

class Result(ResultBase):
    answers: List[AnswerRecord] = []
    test: Optional[MockTestDetail] = None

class ResultPage(CamelModel):
    results: List[ResultSummary]
    pagination: Pagination
