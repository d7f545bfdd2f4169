from datetime import datetime
from typing import List

from app.schemas.base import CamelModel

class OverallStats(CamelModel):
    total_tests: int = 0
    avg_overall_band: float = 0.0
    highest_band: float = 0.0
    lowest_band: float = 0.0
    total_time: int = 0

class SkillPerformance(CamelModel):
    skill: str
    avg_band: float
    highest_band: float
    test_count: int

class ProgressPoint(CamelModel):
    date: str
    avg_band: float
    test_count: int

class UserStatistics(CamelModel):
    overall: OverallStats
    by_skill: List[SkillPerformance] = []
    progress: List[ProgressPoint] = []

class LeaderboardEntry(CamelModel):
    user_id: int
    name: str
    avg_band: float
    test_count: int
    latest_test: datetime

class PracticeSummaryStats(CamelModel):
    total_sessions: int = 0
    total_completed: int = 0
    total_duration: int = 0
    avg_score: float = 0.0
