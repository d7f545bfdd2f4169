"""Linear-threshold scoring of submitted answers.

Pure functions only: no I/O, and the clock is passed in so results are
reproducible. ``section_results`` is produced empty; per-section breakdown is
expected from a collaborator that knows the test's section layout.
"""
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from app.core.constants import BAND_THRESHOLDS, FLOOR_BAND
from app.schemas.answer import AnswerRecordIn
from app.schemas.score import Score, ScoreOutcome
from app.utils.timeutils import utcnow

AnswerLike = Union[AnswerRecordIn, dict]


def round_half_up(value: float, places: int = 1) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def band_for_percentage(percentage: float) -> float:
    for minimum, band in BAND_THRESHOLDS:
        if percentage >= minimum:
            return band
    return FLOOR_BAND


def _is_correct(answer: AnswerLike) -> bool:
    if isinstance(answer, dict):
        return bool(answer.get("is_correct", answer.get("isCorrect")))
    return bool(answer.is_correct)


def calculate_score(answers: Iterable[AnswerLike]) -> Score:
    answers = list(answers)
    raw = sum(1 for answer in answers if _is_correct(answer))
    percentage = (raw * 100 / len(answers)) if answers else 0.0
    # The band reads the unrounded percentage; only the reported value is rounded
    return Score(raw=raw, band=band_for_percentage(percentage), percentage=round_half_up(percentage))


def score_submission(
    answers: Iterable[AnswerLike],
    time_taken: Optional[int] = None,
    now: Optional[datetime] = None
) -> ScoreOutcome:
    now = now or utcnow()
    time_taken = time_taken or 0
    return ScoreOutcome(
        total_score=calculate_score(answers),
        section_results=[],
        time_taken=time_taken,
        started_at=now - timedelta(seconds=time_taken),
    )
