"""Registration / ValueReport 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enrollment.database import Base


REG_PENDING = "Pending"
REG_REGISTERED = "Registered"
REG_REJECTED = "Rejected"
REG_CANCELLED = "Cancelled"


class Registration(Base):
    __tablename__ = "course_registration"

    registration_id = Column(Integer, primary_key=True, autoincrement=True)
    class_id = Column(Integer, ForeignKey("training_class.class_id"), nullable=False)
    participant_id = Column(Integer, ForeignKey("participant.participant_id"), nullable=False)
    reg_date = Column(DateTime, nullable=False)
    reg_status = Column(String(20), nullable=False, default=REG_PENDING)
    payment_status = Column(String(20), nullable=False, default="Unpaid")
    payment_amount = Column(Integer, nullable=False, default=0)
    payment_method = Column(String(50))
    present_day = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    training_class = relationship("TrainingClass", back_populates="registrations")
    participant = relationship("Participant", back_populates="registrations")
    payments = relationship("Payment", back_populates="registration", order_by="Payment.payment_id")
    certificates = relationship("Certificate", back_populates="registration")
    value_reports = relationship("ValueReport", back_populates="registration")

    __table_args__ = (
        UniqueConstraint("class_id", "participant_id", name="uq_registration_class_participant"),
    )


class ValueReport(Base):
    __tablename__ = "value_report"

    value_id = Column(Integer, primary_key=True, autoincrement=True)
    registration_id = Column(Integer, ForeignKey("course_registration.registration_id"), nullable=False)
    value_type = Column(String(50), nullable=False)
    remark = Column(Text)
    value = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())

    registration = relationship("Registration", back_populates="value_reports")
