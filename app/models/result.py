from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, JSON, Index
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.utils.timeutils import utcnow

class Result(Base):
    """Write-once record of a finalized full-test submission."""
    __tablename__ = "results"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    test_id = Column(Integer, ForeignKey("tests.id"), nullable=False, index=True)
    answers = Column(JSON, nullable=False, default=list)

    score_raw = Column(Integer, nullable=False, default=0)
    score_band = Column(Float, nullable=False)
    score_percentage = Column(Float, nullable=False, default=0.0)
    section_results = Column(JSON, nullable=False, default=list)

    time_taken = Column(Integer, nullable=False, default=0)  # seconds
    started_at = Column(DateTime, nullable=False)
    submitted_at = Column(DateTime, nullable=False, default=utcnow)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="results")
    test = relationship("MockTest")

    __table_args__ = (
        Index("ix_results_user_submitted", "user_id", "submitted_at"),
        Index("ix_results_submitted_at", "submitted_at"),
    )

    @property
    def total_score(self) -> dict:
        return {
            "raw": self.score_raw,
            "band": self.score_band,
            "percentage": self.score_percentage,
        }
