from sqlalchemy import Column, String, Integer, DateTime, Float, Enum
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import RoleEnum
from app.utils.timeutils import utcnow

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    role = Column(
        Enum(RoleEnum, values_callable=lambda e: [m.value for m in e], name="roleenum"),
        nullable=False,
        default=RoleEnum.USER
    )
    target_band = Column(Float, default=7.0)
    current_level = Column(String(20), default="beginner")
    exam_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    results = relationship("Result", back_populates="user")
    practice_sessions = relationship("PracticeSession", back_populates="user")
