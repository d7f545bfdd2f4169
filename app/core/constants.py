from enum import Enum


class RoleEnum(str, Enum):
    USER = "user"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"
    CONTENT_ADMIN = "content_admin"

class SkillEnum(str, Enum):
    LISTENING = "listening"
    READING = "reading"
    WRITING = "writing"
    SPEAKING = "speaking"

# Skill tag carried by sessions derived from full-test submissions
OVERALL_SKILL = "overall"

# Skill tags a practice session may carry
SESSION_SKILLS = tuple(skill.value for skill in SkillEnum) + (OVERALL_SKILL,)

class PracticeTypeEnum(str, Enum):
    FULL_TEST = "full-test"
    SECTION = "section"
    QUESTION = "question"
    PRACTICE = "practice"

class PracticeStatusEnum(str, Enum):
    STARTED = "started"
    COMPLETED = "completed"
    PAUSED = "paused"
    ABANDONED = "abandoned"

class MockTestTypeEnum(str, Enum):
    FULL_MOCK = "full-mock"
    PRACTICE = "practice"
    MINI = "mini"
    DAILY = "daily"

class MockTestStatusEnum(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"

# Band thresholds, evaluated top-down: (minimum percentage, band)
BAND_THRESHOLDS = (
    (90.0, 9.0),
    (80.0, 8.0),
    (70.0, 7.0),
    (60.0, 6.0),
    (50.0, 5.0),
)
FLOOR_BAND = 4.0
