from datetime import timedelta
from sqlalchemy.orm import Session

from app.crud.result import result as crud_result
from app.services.analytics import analytics_service
from app.utils.timeutils import utcnow


def _record_result(db, user, test, band, days_ago=0, time_taken=600, section_results=None):
    submitted_at = utcnow() - timedelta(days=days_ago)
    return crud_result.create(db, obj_in={
        "user_id": user.id,
        "test_id": test.id,
        "answers": [],
        "score_raw": 0,
        "score_band": band,
        "score_percentage": 0.0,
        "section_results": section_results or [],
        "time_taken": time_taken,
        "started_at": submitted_at - timedelta(seconds=time_taken),
        "submitted_at": submitted_at,
    })


def _section(skill, band):
    return {"skill": skill, "score": {"band": band}, "questions": []}


class TestUserStatistics:
    def test_empty_history(self, db_session: Session, user_factory, context_for):
        statistics = analytics_service.get_user_statistics(db_session, context_for(user_factory()), days=90)

        assert statistics.overall.total_tests == 0
        assert statistics.overall.avg_overall_band == 0.0
        assert statistics.by_skill == []
        assert statistics.progress == []

    def test_overall_excludes_results_outside_window(self, db_session: Session, user_factory, test_factory, context_for):
        candidate = user_factory()
        mock = test_factory()
        _record_result(db_session, candidate, mock, band=6.0, days_ago=1, time_taken=100)
        _record_result(db_session, candidate, mock, band=7.0, days_ago=2, time_taken=200)
        _record_result(db_session, candidate, mock, band=9.0, days_ago=120)

        overall = analytics_service.get_user_statistics(db_session, context_for(candidate), days=90).overall

        assert overall.total_tests == 2
        assert overall.avg_overall_band == 6.5
        assert overall.highest_band == 7.0
        assert overall.lowest_band == 6.0
        assert overall.total_time == 300

    def test_other_users_results_are_ignored(self, db_session: Session, user_factory, test_factory, context_for):
        candidate = user_factory()
        mock = test_factory()
        _record_result(db_session, user_factory(), mock, band=9.0)

        overall = analytics_service.get_user_statistics(db_session, context_for(candidate), days=90).overall
        assert overall.total_tests == 0

    def test_skill_performance_groups_section_results(self, db_session: Session, user_factory, test_factory, context_for):
        candidate = user_factory()
        mock = test_factory()
        _record_result(db_session, candidate, mock, band=6.5, section_results=[_section("reading", 7.0), _section("writing", 5.5)])
        _record_result(db_session, candidate, mock, band=7.0, section_results=[_section("reading", 8.0)])

        by_skill = analytics_service.get_user_statistics(db_session, context_for(candidate), days=90).by_skill

        assert [p.skill for p in by_skill] == ["reading", "writing"]
        assert by_skill[0].avg_band == 7.5
        assert by_skill[0].highest_band == 8.0
        assert by_skill[0].test_count == 2
        assert by_skill[1].test_count == 1

    def test_progress_is_grouped_by_day_ascending(self, db_session: Session, user_factory, test_factory, context_for):
        candidate = user_factory()
        mock = test_factory()
        _record_result(db_session, candidate, mock, band=5.0, days_ago=3)
        _record_result(db_session, candidate, mock, band=6.0, days_ago=3)
        _record_result(db_session, candidate, mock, band=7.0, days_ago=1)

        progress = analytics_service.get_user_statistics(db_session, context_for(candidate), days=90).progress

        assert [p.test_count for p in progress] == [2, 1]
        assert [p.avg_band for p in progress] == [5.5, 7.0]
        assert progress[0].date < progress[1].date


class TestLeaderboard:
    def test_ranked_by_average_band(self, db_session: Session, user_factory, test_factory):
        mock = test_factory()
        strong = user_factory(name="Strong")
        steady = user_factory(name="Steady")
        _record_result(db_session, strong, mock, band=8.0)
        _record_result(db_session, strong, mock, band=9.0)
        _record_result(db_session, steady, mock, band=6.0)

        leaderboard = analytics_service.get_leaderboard(db_session, limit=10, days=30)

        assert [entry.name for entry in leaderboard] == ["Strong", "Steady"]
        assert leaderboard[0].avg_band == 8.5
        assert leaderboard[0].test_count == 2
        assert leaderboard[0].latest_test is not None

    def test_ties_broken_by_user_id(self, db_session: Session, user_factory, test_factory):
        mock = test_factory()
        first = user_factory(name="First")
        second = user_factory(name="Second")
        _record_result(db_session, second, mock, band=7.0)
        _record_result(db_session, first, mock, band=7.0)

        leaderboard = analytics_service.get_leaderboard(db_session, limit=10, days=30)
        assert [entry.user_id for entry in leaderboard] == [first.id, second.id]

    def test_limit_and_window(self, db_session: Session, user_factory, test_factory):
        mock = test_factory()
        for band in (5.0, 6.0, 7.0):
            _record_result(db_session, user_factory(), mock, band=band)
        _record_result(db_session, user_factory(name="Stale"), mock, band=9.0, days_ago=45)

        leaderboard = analytics_service.get_leaderboard(db_session, limit=2, days=30)

        assert len(leaderboard) == 2
        assert [entry.avg_band for entry in leaderboard] == [7.0, 6.0]
        assert "Stale" not in [entry.name for entry in leaderboard]
