"""수료증 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enrollment.database import Base


CERT_VALID = "Valid"
CERT_EXPIRED = "Expired"


class Certificate(Base):
    __tablename__ = "certificate"

    certificate_id = Column(Integer, primary_key=True, autoincrement=True)
    certificate_number = Column(String(32), unique=True, nullable=False)
    name = Column(String(200), nullable=False)
    issue_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=CERT_VALID)
    participant_id = Column(Integer, ForeignKey("participant.participant_id"), nullable=True)
    instructor_id = Column(Integer, ForeignKey("instructor.instructor_id"), nullable=True)
    course_id = Column(Integer, ForeignKey("course.course_id"), nullable=False)
    registration_id = Column(Integer, ForeignKey("course_registration.registration_id"), nullable=True)
    pdf_url = Column(String(500))
    drive_link = Column(String(500))
    created_at = Column(DateTime, server_default=func.now())

    participant = relationship("Participant")
    instructor = relationship("Instructor")
    course = relationship("Course")
    registration = relationship("Registration", back_populates="certificates")

    __table_args__ = (
        CheckConstraint(
            "participant_id IS NOT NULL OR instructor_id IS NOT NULL",
            name="ck_certificate_has_holder",
        ),
    )
