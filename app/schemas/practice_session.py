from typing import Any, Dict, List, Optional
from datetime import datetime

from app.core.constants import PracticeTypeEnum, PracticeStatusEnum, SkillEnum
from app.schemas.base import CamelModel
from app.schemas.answer import AnswerRecordIn, AnswerRecord
from app.schemas.score import Score
from app.schemas.mock_test import MockTestSummary
from app.schemas.analytics import PracticeSummaryStats
from app.schemas.response import Pagination

class PracticeSessionStart(CamelModel):
    type: Optional[PracticeTypeEnum] = None
    test: Optional[int] = None
    section: Optional[int] = None
    question: Optional[int] = None
    skill: Optional[SkillEnum] = None

class PracticeSessionUpdate(CamelModel):
    answers: Optional[List[AnswerRecordIn]] = None
    status: Optional[PracticeStatusEnum] = None
    end_time: Optional[datetime] = None

class SubmitAnswersRequest(CamelModel):
    session_id: int
    answers: List[AnswerRecordIn]

class PracticeSessionSummary(CamelModel):
    id: int
    user_id: int
    test_id: Optional[int] = None
    section_id: Optional[int] = None
    question_id: Optional[int] = None
    type: PracticeTypeEnum
    skill: Optional[str] = None
    status: PracticeStatusEnum
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = None
    score: Optional[Score] = None
    feedback: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    test: Optional[MockTestSummary] = None

class PracticeSession(PracticeSessionSummary):
    answers: List[AnswerRecord] = []
    device_info: Optional[Dict[str, Any]] = None

class ActiveSession(PracticeSession):
    time_elapsed: int

class SessionProgress(CamelModel):
    total_questions: int
    answered_questions: int
    correct_answers: int
    accuracy: float
    time_spent: int
    completion_rate: float

class SessionProgressResponse(CamelModel):
    session: PracticeSession
    progress: SessionProgress

class SubmitAnswersResponse(CamelModel):
    total_answers: int
    recent_answers: List[AnswerRecord]

class SessionPage(CamelModel):
    sessions: List[PracticeSessionSummary]
    pagination: Pagination
    statistics: PracticeSummaryStats
