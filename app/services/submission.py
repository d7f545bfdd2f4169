"""Full-test submission: score, record the result, then derive a practice session.

The result write is the authoritative record and is committed first. The
derived session is a projection of it; if writing the projection fails the
submission still succeeds and the failure is only logged.
"""
import logging
from typing import List
from sqlalchemy.orm import Session

from app.core.constants import OVERALL_SKILL, PracticeStatusEnum, PracticeTypeEnum
from app.models.result import Result
from app.schemas.answer import AnswerRecordIn
from app.schemas.result import ResultSubmit
from app.schemas.user import UserContext
from app.services.practice_session import practice_session_service
from app.services.result import result_service
from app.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


def is_marked_correct(question_id, section_results: List[dict]) -> bool:
    """Correctness as recorded in the section breakdown; unlisted questions count as wrong."""
    return any(
        str(question.get("question_id")) == str(question_id) and question.get("is_correct")
        for section in section_results or []
        for question in section.get("questions", [])
    )


class SubmissionService:

    def build_session_data(self, result: Result, answers: List[AnswerRecordIn]) -> dict:
        # Submitted is_correct flags are not trusted here, only the section breakdown is
        derived_answers = [
            {
                "question_id": answer.question_id,
                "answer": answer.answer,
                "is_correct": is_marked_correct(answer.question_id, result.section_results),
                "time_taken": answer.time_taken,
            }
            for answer in answers
        ]

        return {
            "user_id": result.user_id,
            "test_id": result.test_id,
            "type": PracticeTypeEnum.FULL_TEST,
            "skill": OVERALL_SKILL,
            "status": PracticeStatusEnum.COMPLETED,
            "start_time": result.started_at,
            "end_time": result.submitted_at,
            "duration": result.time_taken,
            "answers": derived_answers,
            "submitted_answers": [answer.model_dump(by_alias=True) for answer in answers],
            "score_raw": result.score_raw,
            "score_band": result.score_band,
            "score_percentage": result.score_percentage,
        }

    def submit(self, db: Session, submission_in: ResultSubmit, current_user_context: UserContext) -> Result:
        result = result_service.create_result(
            db,
            owner_id=current_user_context.user.id,
            test_id=submission_in.test,
            answers=submission_in.answers,
            time_taken=submission_in.time_taken,
            submitted_at=utcnow()
        )
        logger.info(
            f"Result {result.id} submitted by user {result.user_id} for test {result.test_id}: "
            f"band {result.score_band} ({result.score_percentage}%)"
        )

        result_id = result.id
        try:
            session_data = self.build_session_data(result, submission_in.answers)
            practice_session_service.record_completed_session(db, session_data)
        except Exception:
            db.rollback()
            logger.exception(f"Failed to record practice session for result {result_id}; result kept")

        return result


submission_service = SubmissionService()
