from collections import defaultdict
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session

from app.crud.result import result as crud_result
from app.crud.practice_session import practice_session as crud_practice_session
from app.schemas.analytics import (
    OverallStats, SkillPerformance, ProgressPoint, UserStatistics,
    LeaderboardEntry, PracticeSummaryStats
)
from app.schemas.user import UserContext
from app.utils.timeutils import utcnow


def _round(value: Optional[float]) -> float:
    return round(float(value), 2) if value is not None else 0.0


class AnalyticsService:
    """Read-side aggregates over results and practice sessions. Never writes."""

    def window_start(self, days: int, now: Optional[datetime] = None) -> datetime:
        return (now or utcnow()) - timedelta(days=days)

    def get_overall_stats(self, db: Session, user_id: int, since: datetime) -> OverallStats:
        row = crud_result.get_user_window_stats(db, user_id=user_id, since=since)
        if not row.total_tests:
            return OverallStats()

        return OverallStats(
            total_tests=row.total_tests,
            avg_overall_band=_round(row.avg_overall_band),
            highest_band=_round(row.highest_band),
            lowest_band=_round(row.lowest_band),
            total_time=int(row.total_time or 0)
        )

    def get_skill_performance(self, db: Session, user_id: int, since: datetime) -> List[SkillPerformance]:
        bands_by_skill = defaultdict(list)
        for result in crud_result.get_user_results_since(db, user_id=user_id, since=since):
            for section in result.section_results or []:
                band = (section.get("score") or {}).get("band")
                if section.get("skill") and band is not None:
                    bands_by_skill[section["skill"]].append(band)

        performance = [
            SkillPerformance(
                skill=skill,
                avg_band=_round(sum(bands) / len(bands)),
                highest_band=_round(max(bands)),
                test_count=len(bands)
            )
            for skill, bands in bands_by_skill.items()
        ]
        return sorted(performance, key=lambda p: (-p.avg_band, p.skill))

    def get_progress_trend(self, db: Session, user_id: int, since: datetime) -> List[ProgressPoint]:
        bands_by_day = defaultdict(list)
        for result in crud_result.get_user_results_since(db, user_id=user_id, since=since):
            bands_by_day[result.submitted_at.strftime("%Y-%m-%d")].append(result.score_band)

        return [
            ProgressPoint(date=day, avg_band=_round(sum(bands) / len(bands)), test_count=len(bands))
            for day, bands in sorted(bands_by_day.items())
        ]

    def get_user_statistics(self, db: Session, current_user_context: UserContext, days: int) -> UserStatistics:
        user_id = current_user_context.user.id
        since = self.window_start(days)

        return UserStatistics(
            overall=self.get_overall_stats(db, user_id, since),
            by_skill=self.get_skill_performance(db, user_id, since),
            progress=self.get_progress_trend(db, user_id, since)
        )

    def get_leaderboard(self, db: Session, limit: int, days: int) -> List[LeaderboardEntry]:
        rows = crud_result.get_leaderboard_rows(db, since=self.window_start(days), limit=limit)
        return [
            LeaderboardEntry(
                user_id=row.user_id,
                name=row.name,
                avg_band=_round(row.avg_band),
                test_count=row.test_count,
                latest_test=row.latest_test
            )
            for row in rows
        ]

    def get_practice_summary(self, db: Session, user_id: int, **filters) -> PracticeSummaryStats:
        row = crud_practice_session.get_summary_stats(db, user_id=user_id, **filters)
        if not row.total_sessions:
            return PracticeSummaryStats()

        return PracticeSummaryStats(
            total_sessions=row.total_sessions,
            total_completed=int(row.total_completed or 0),
            total_duration=int(row.total_duration or 0),
            avg_score=_round(row.avg_score)
        )


analytics_service = AnalyticsService()
