"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enrollment.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(100), unique=True, nullable=False)
    username = Column(String(50), nullable=False)
    role = Column(String(20), nullable=False)  # admin/participant/instructor
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    participant_profile = relationship("Participant", back_populates="user", uselist=False)
    instructor_profile = relationship("Instructor", back_populates="user", uselist=False)
    notifications = relationship("Notification", back_populates="user")


class Participant(Base):
    __tablename__ = "participant"

    participant_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    full_name = Column(String(100), nullable=False)
    phone_number = Column(String(30))
    company = Column(String(100))
    job_title = Column(String(100))
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="participant_profile")
    registrations = relationship("Registration", back_populates="participant")


class Instructor(Base):
    __tablename__ = "instructor"

    instructor_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    full_name = Column(String(100), nullable=False)
    phone_number = Column(String(30))
    proficiency = Column(String(200))
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="instructor_profile")
