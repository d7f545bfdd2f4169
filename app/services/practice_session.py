import logging
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.constants import PracticeStatusEnum
from app.core.exceptions import NotFoundError, ValidationError
from app.crud.mock_test import mock_test as crud_mock_test
from app.crud.practice_session import practice_session as crud_practice_session
from app.models.practice_session import PracticeSession
from app.schemas.answer import AnswerRecordIn
from app.schemas.practice_session import (
    PracticeSessionStart, PracticeSessionUpdate, SubmitAnswersRequest,
    PracticeSession as PracticeSessionSchema, PracticeSessionSummary, ActiveSession,
    SessionProgress, SessionProgressResponse, SubmitAnswersResponse, SessionPage
)
from app.schemas.response import Pagination
from app.schemas.user import UserContext
from app.services.analytics import analytics_service
from app.services.scoring import calculate_score, round_half_up
from app.utils.permission import PermissionHelper as permission_helper
from app.utils.timeutils import utcnow, to_naive_utc, elapsed_seconds

logger = logging.getLogger(__name__)


def _is_answered(answer: dict) -> bool:
    return answer.get("answer") not in (None, "", [], {})


class PracticeSessionService:

    def _get_owned_session(self, db: Session, session_id: int, current_user_context: UserContext) -> PracticeSession:
        session = crud_practice_session.get(db, id=session_id)
        if not session:
            raise NotFoundError("Practice session not found")

        permission_helper.require_owner(current_user_context, session.user_id, resource=f"practice session {session_id}")
        return session

    def _require_open(self, session: PracticeSession):
        if session.status == PracticeStatusEnum.COMPLETED:
            raise ValidationError("Practice session is already completed")

    def _normalize_answers(self, answers: List[AnswerRecordIn]) -> List[dict]:
        return [answer.model_dump() for answer in answers]

    def start_session(
        self, db: Session, session_in: PracticeSessionStart, current_user_context: UserContext,
        device_info: Optional[dict] = None
    ) -> PracticeSession:
        if not session_in.type:
            raise ValidationError("Practice type is required")

        if session_in.test is not None and not crud_mock_test.resolve(db, test_id=session_in.test):
            raise NotFoundError("Test not found")

        session_data = {
            "user_id": current_user_context.user.id,
            "type": session_in.type,
            "start_time": utcnow(),
            "status": PracticeStatusEnum.STARTED,
            "answers": [],
            "test_id": session_in.test,
            "section_id": session_in.section,
            "question_id": session_in.question,
            "skill": session_in.skill.value if session_in.skill else None,
            "device_info": device_info,
        }
        return crud_practice_session.create(db, obj_in=session_data)

    def get_session(self, db: Session, session_id: int, current_user_context: UserContext) -> PracticeSession:
        return self._get_owned_session(db, session_id, current_user_context)

    def get_active_session(self, db: Session, current_user_context: UserContext) -> ActiveSession:
        # Best-effort: concurrent starts can leave more than one session open
        session = crud_practice_session.get_active(db, user_id=current_user_context.user.id)
        if not session:
            raise NotFoundError("No active session found")

        data = PracticeSessionSchema.model_validate(session).model_dump()
        data["time_elapsed"] = elapsed_seconds(session.start_time, utcnow())
        return ActiveSession.model_validate(data)

    def append_answers(
        self, db: Session, session_id: int, answers: List[AnswerRecordIn], current_user_context: UserContext
    ) -> PracticeSession:
        session = self._get_owned_session(db, session_id, current_user_context)
        self._require_open(session)
        return crud_practice_session.append_answers(db, db_obj=session, answers=self._normalize_answers(answers))

    def _resolve_end_time(self, session: PracticeSession, end_time: Optional[datetime] = None) -> datetime:
        end_time = to_naive_utc(end_time) if end_time else utcnow()
        if end_time < session.start_time:
            raise ValidationError("End time cannot be before start time")
        return end_time

    def _complete(self, db: Session, session: PracticeSession, end_time: Optional[datetime] = None) -> PracticeSession:
        self._require_open(session)

        end_time = self._resolve_end_time(session, end_time)
        score = calculate_score(session.answers or [])
        update_data = {
            "status": PracticeStatusEnum.COMPLETED,
            "end_time": end_time,
            "duration": elapsed_seconds(session.start_time, end_time),
            "score_raw": score.raw,
            "score_band": score.band,
            "score_percentage": score.percentage,
        }
        completed = crud_practice_session.update(db, db_obj=session, obj_in=update_data)
        logger.info(f"Practice session {session.id} completed in {completed.duration}s with band {score.band}")
        return completed

    def complete_session(
        self, db: Session, session_id: int, current_user_context: UserContext, end_time: Optional[datetime] = None
    ) -> PracticeSession:
        session = self._get_owned_session(db, session_id, current_user_context)
        return self._complete(db, session, end_time)

    def update_session(
        self, db: Session, session_id: int, session_in: PracticeSessionUpdate, current_user_context: UserContext
    ) -> PracticeSession:
        session = self._get_owned_session(db, session_id, current_user_context)
        self._require_open(session)

        completing = session_in.status == PracticeStatusEnum.COMPLETED or session_in.end_time
        # Validated before any write so a rejected update leaves the session untouched
        end_time = self._resolve_end_time(session, session_in.end_time) if completing else None

        if session_in.answers:
            session = crud_practice_session.append_answers(
                db, db_obj=session, answers=self._normalize_answers(session_in.answers)
            )

        if completing:
            return self._complete(db, session, end_time)

        if session_in.status:
            session = crud_practice_session.update(db, db_obj=session, obj_in={"status": session_in.status})

        return session

    def submit_answers(
        self, db: Session, request_in: SubmitAnswersRequest, current_user_context: UserContext
    ) -> SubmitAnswersResponse:
        session = self.append_answers(db, request_in.session_id, request_in.answers, current_user_context)
        return SubmitAnswersResponse(
            total_answers=len(session.answers),
            recent_answers=self._normalize_answers(request_in.answers)
        )

    def delete_session(self, db: Session, session_id: int, current_user_context: UserContext) -> None:
        session = self._get_owned_session(db, session_id, current_user_context)

        if session.status == PracticeStatusEnum.COMPLETED:
            raise ValidationError("Cannot delete completed sessions")

        crud_practice_session.delete(db, id=session.id)

    def compute_progress(self, db: Session, session_id: int, current_user_context: UserContext) -> SessionProgressResponse:
        session = self._get_owned_session(db, session_id, current_user_context)

        answers = session.answers or []
        total_questions = len(answers)
        answered_questions = sum(1 for answer in answers if _is_answered(answer))
        correct_answers = sum(1 for answer in answers if answer.get("is_correct"))
        time_spent = elapsed_seconds(session.start_time, session.end_time or utcnow())

        progress = SessionProgress(
            total_questions=total_questions,
            answered_questions=answered_questions,
            correct_answers=correct_answers,
            accuracy=round_half_up(correct_answers * 100 / total_questions) if total_questions else 0,
            time_spent=time_spent,
            completion_rate=round_half_up(answered_questions * 100 / total_questions) if total_questions else 0
        )
        return SessionProgressResponse(session=PracticeSessionSchema.model_validate(session), progress=progress)

    def list_sessions(
        self, db: Session, current_user_context: UserContext, page: int = 1, limit: int = 10, **filters
    ) -> SessionPage:
        user_id = current_user_context.user.id
        for key in ("start_date", "end_date"):
            if filters.get(key):
                filters[key] = to_naive_utc(filters[key])

        sessions = crud_practice_session.get_multi_filtered(
            db, user_id=user_id, skip=(page - 1) * limit, limit=limit, **filters
        )
        statistics = analytics_service.get_practice_summary(db, user_id=user_id, **filters)

        return SessionPage(
            sessions=[PracticeSessionSummary.model_validate(s) for s in sessions],
            pagination=Pagination.build(page=page, limit=limit, total=statistics.total_sessions),
            statistics=statistics
        )

    def record_completed_session(self, db: Session, session_data: dict) -> PracticeSession:
        """Persist an already-scored, already-completed session on behalf of its owner."""
        return crud_practice_session.create(db, obj_in=session_data)


practice_session_service = PracticeSessionService()
