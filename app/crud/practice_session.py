from datetime import datetime
from typing import List, Optional
from sqlalchemy import func, case
from sqlalchemy.orm import Session, selectinload

from app.core.constants import PracticeStatusEnum
from app.crud.base import CRUDBase
from app.models.practice_session import PracticeSession
from app.schemas.practice_session import PracticeSession as PracticeSessionSchema, PracticeSessionUpdate

class CRUDPracticeSession(CRUDBase[PracticeSession, PracticeSessionSchema, PracticeSessionUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(PracticeSession).options(selectinload(PracticeSession.test))

    def get(self, db: Session, id: int) -> Optional[PracticeSession]:
        return self._query_with_relationships(db).filter(PracticeSession.id == id).first()

    def get_active(self, db: Session, user_id: int) -> Optional[PracticeSession]:
        return (
            self._query_with_relationships(db)
            .filter(PracticeSession.user_id == user_id)
            .filter(PracticeSession.status == PracticeStatusEnum.STARTED)
            .order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())
            .first()
        )

    def get_all_by_user(self, db: Session, user_id: int) -> List[PracticeSession]:
        return (
            self._query_with_relationships(db)
            .filter(PracticeSession.user_id == user_id)
            .order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())
            .all()
        )

    def _apply_filters(
        self,
        query,
        user_id: int,
        status: Optional[PracticeStatusEnum] = None,
        type: Optional[str] = None,
        skill: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ):
        query = query.filter(PracticeSession.user_id == user_id)
        if status:
            query = query.filter(PracticeSession.status == status)
        if type:
            query = query.filter(PracticeSession.type == type)
        if skill:
            query = query.filter(PracticeSession.skill == skill)
        if start_date:
            query = query.filter(PracticeSession.created_at >= start_date)
        if end_date:
            query = query.filter(PracticeSession.created_at <= end_date)
        return query

    def get_multi_filtered(self, db: Session, user_id: int, skip: int = 0, limit: int = 10, **filters) -> List[PracticeSession]:
        return (
            self._apply_filters(self._query_with_relationships(db), user_id, **filters)
            .order_by(PracticeSession.created_at.desc(), PracticeSession.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_summary_stats(self, db: Session, user_id: int, **filters):
        query = db.query(
            func.count(PracticeSession.id).label("total_sessions"),
            func.sum(
                case((PracticeSession.status == PracticeStatusEnum.COMPLETED, 1), else_=0)
            ).label("total_completed"),
            func.sum(PracticeSession.duration).label("total_duration"),
            func.avg(PracticeSession.score_band).label("avg_score")
        )
        return self._apply_filters(query, user_id, **filters).one()

    def append_answers(self, db: Session, db_obj: PracticeSession, answers: List[dict]) -> PracticeSession:
        # JSON columns only track reassignment, so build a new list
        db_obj.answers = [*(db_obj.answers or []), *answers]
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj


practice_session = CRUDPracticeSession(PracticeSession)
