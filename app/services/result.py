from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud.mock_test import mock_test as crud_mock_test
from app.crud.result import result as crud_result
from app.models.mock_test import MockTest
from app.models.result import Result
from app.schemas.answer import AnswerRecordIn
from app.schemas.response import Pagination
from app.schemas.result import ResultPage, ResultSummary
from app.schemas.user import UserContext
from app.services.scoring import score_submission
from app.utils.permission import PermissionHelper as permission_helper
from app.utils.timeutils import utcnow


class ResultService:
    """Sole writer of results. A result is never updated or deleted once created."""

    def resolve_test(self, db: Session, test_id: int) -> MockTest:
        test = crud_mock_test.resolve(db, test_id=test_id)
        if not test:
            raise NotFoundError("Test not found")
        return test

    def create_result(
        self,
        db: Session,
        owner_id: int,
        test_id: int,
        answers: List[AnswerRecordIn],
        time_taken: Optional[int] = None,
        submitted_at: Optional[datetime] = None
    ) -> Result:
        self.resolve_test(db, test_id)

        submitted_at = submitted_at or utcnow()
        outcome = score_submission(answers, time_taken=time_taken, now=submitted_at)

        result_data = {
            "user_id": owner_id,
            "test_id": test_id,
            "answers": [answer.model_dump() for answer in answers],
            "score_raw": outcome.total_score.raw,
            "score_band": outcome.total_score.band,
            "score_percentage": outcome.total_score.percentage,
            "section_results": [section.model_dump() for section in outcome.section_results],
            "time_taken": outcome.time_taken,
            "started_at": outcome.started_at,
            "submitted_at": submitted_at,
        }
        return crud_result.create(db, obj_in=result_data)

    def get_result(self, db: Session, result_id: int, current_user_context: UserContext) -> Result:
        result = crud_result.get(db, id=result_id)
        if not result:
            raise NotFoundError("Result not found")

        permission_helper.require_owner(current_user_context, result.user_id, resource=f"result {result_id}")
        return result

    def list_user_results(
        self, db: Session, current_user_context: UserContext, page: int = 1, limit: int = 10,
        test_id: Optional[int] = None
    ) -> ResultPage:
        user_id = current_user_context.user.id
        results = crud_result.get_multi_by_user(
            db, user_id=user_id, skip=(page - 1) * limit, limit=limit, test_id=test_id
        )
        total = crud_result.count_by_user(db, user_id=user_id, test_id=test_id)

        return ResultPage(
            results=[ResultSummary.model_validate(r) for r in results],
            pagination=Pagination.build(page=page, limit=limit, total=total)
        )


result_service = ResultService()
