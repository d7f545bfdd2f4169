from datetime import datetime
from typing import List, Optional, Union

from app.schemas.base import CamelModel

class Score(CamelModel):
    raw: int
    band: float
    percentage: float

class SectionScore(CamelModel):
    band: float
    raw: Optional[int] = None
    percentage: Optional[float] = None

class SectionQuestion(CamelModel):
    question_id: Union[int, str]
    is_correct: bool = False

class SectionResult(CamelModel):
    skill: str
    score: SectionScore
    questions: List[SectionQuestion] = []

class ScoreOutcome(CamelModel):
    total_score: Score
    section_results: List[SectionResult] = []
    time_taken: int = 0
    started_at: datetime
