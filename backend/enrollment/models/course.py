"""Course / TrainingClass 모델 정의입니다. 좌석 카운터는 저장소 CHECK 제약으로 정원을 강제합니다."""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enrollment.database import Base


class Course(Base):
    __tablename__ = "course"

    course_id = Column(Integer, primary_key=True, autoincrement=True)
    course_name = Column(String(200), nullable=False)
    course_type = Column(String(50))
    created_at = Column(DateTime, server_default=func.now())

    classes = relationship("TrainingClass", back_populates="course")


class TrainingClass(Base):
    __tablename__ = "training_class"

    class_id = Column(Integer, primary_key=True, autoincrement=True)
    course_id = Column(Integer, ForeignKey("course.course_id"), nullable=False)
    quota = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False, default=0)
    status = Column(String(20), default="Active")
    start_reg_date = Column(Date, nullable=False)
    end_reg_date = Column(Date, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    duration_day = Column(Integer, nullable=False, default=1)
    location = Column(String(200))
    room = Column(String(100))
    # 취소되지 않은 등록 수. register/cancel이 같은 트랜잭션에서 증감한다.
    seats_taken = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    course = relationship("Course", back_populates="classes")
    registrations = relationship("Registration", back_populates="training_class")

    __table_args__ = (
        CheckConstraint("seats_taken >= 0", name="ck_class_seats_non_negative"),
        CheckConstraint("seats_taken <= quota", name="ck_class_seats_within_quota"),
    )
