from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, JSON, Enum, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import PracticeTypeEnum, PracticeStatusEnum
from app.utils.timeutils import utcnow

class PracticeSession(Base):
    """One attempt at a test, section, single question or free practice."""
    __tablename__ = "practice_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    test_id = Column(Integer, ForeignKey("tests.id"), nullable=True, index=True)
    section_id = Column(Integer, nullable=True)
    question_id = Column(Integer, nullable=True)

    type = Column(
        Enum(PracticeTypeEnum, values_callable=lambda e: [m.value for m in e], name="practicetypeenum"),
        nullable=False
    )
    skill = Column(String(20), nullable=True, index=True)
    status = Column(
        Enum(PracticeStatusEnum, values_callable=lambda e: [m.value for m in e], name="practicestatusenum"),
        nullable=False,
        default=PracticeStatusEnum.STARTED,
        index=True
    )

    start_time = Column(DateTime, nullable=False, default=utcnow)
    end_time = Column(DateTime, nullable=True)
    duration = Column(Integer, nullable=True)  # seconds

    answers = Column(JSON, nullable=False, default=list)
    submitted_answers = Column(JSON, nullable=True)

    score_raw = Column(Integer, nullable=True)
    score_band = Column(Float, nullable=True)
    score_percentage = Column(Float, nullable=True)

    feedback = Column(Text, nullable=True)
    device_info = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="practice_sessions")
    test = relationship("MockTest")

    __table_args__ = (
        Index("ix_practice_sessions_user_created", "user_id", "created_at"),
    )

    @property
    def score(self):
        if self.score_band is None:
            return None
        return {
            "raw": self.score_raw,
            "band": self.score_band,
            "percentage": self.score_percentage,
        }
