from datetime import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.crud.base import CRUDBase
from app.models.result import Result
from app.models.user import User
from app.schemas.result import Result as ResultSchema

class CRUDResult(CRUDBase[Result, ResultSchema, ResultSchema]):
    """Results are a write-once ledger: only create and read paths are exposed."""

    def _query_with_relationships(self, db: Session):
        return db.query(Result).options(selectinload(Result.test))

    def get(self, db: Session, id: int) -> Optional[Result]:
        return self._query_with_relationships(db).filter(Result.id == id).first()

    def update(self, *args, **kwargs):
        raise NotImplementedError("Results are immutable once submitted.")

    def delete(self, *args, **kwargs):
        raise NotImplementedError("Results are immutable once submitted.")

    def _user_filter(self, query, user_id: int, test_id: Optional[int] = None):
        query = query.filter(Result.user_id == user_id)
        if test_id is not None:
            query = query.filter(Result.test_id == test_id)
        return query

    def get_multi_by_user(
        self, db: Session, user_id: int, skip: int = 0, limit: int = 10, test_id: Optional[int] = None
    ) -> List[Result]:
        return (
            self._user_filter(self._query_with_relationships(db), user_id, test_id)
            .order_by(Result.submitted_at.desc(), Result.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count_by_user(self, db: Session, user_id: int, test_id: Optional[int] = None) -> int:
        return self._user_filter(db.query(func.count(Result.id)), user_id, test_id).scalar() or 0

    def get_user_window_stats(self, db: Session, user_id: int, since: datetime):
        return (
            db.query(
                func.count(Result.id).label("total_tests"),
                func.avg(Result.score_band).label("avg_overall_band"),
                func.max(Result.score_band).label("highest_band"),
                func.min(Result.score_band).label("lowest_band"),
                func.sum(Result.time_taken).label("total_time")
            )
            .filter(Result.user_id == user_id, Result.submitted_at >= since)
            .one()
        )

    def get_user_results_since(self, db: Session, user_id: int, since: datetime) -> List[Result]:
        return (
            db.query(Result)
            .filter(Result.user_id == user_id, Result.submitted_at >= since)
            .order_by(Result.submitted_at.asc())
            .all()
        )

    def get_leaderboard_rows(self, db: Session, since: datetime, limit: int):
        avg_band = func.avg(Result.score_band)
        return (
            db.query(
                Result.user_id.label("user_id"),
                User.name.label("name"),
                avg_band.label("avg_band"),
                func.count(Result.id).label("test_count"),
                func.max(Result.submitted_at).label("latest_test")
            )
            .join(User, User.id == Result.user_id)
            .filter(Result.submitted_at >= since)
            .group_by(Result.user_id, User.name)
            .order_by(avg_band.desc(), Result.user_id.asc())
            .limit(limit)
            .all()
        )


result = CRUDResult(Result)
