from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from enrollment.database import Base


PAYMENT_UNPAID = "Unpaid"
PAYMENT_PARTIAL = "Partial"
PAYMENT_PENDING = "Pending"
PAYMENT_PAID = "Paid"
PAYMENT_REJECTED = "Rejected"
# Payment.status: Pending -> Paid | Rejected (관리자 검증), 수기 입력은 Unpaid/Partial/Paid


class Payment(Base):
    __tablename__ = "payment"

    payment_id = Column(Integer, primary_key=True, autoincrement=True)
    registration_id = Column(Integer, ForeignKey("course_registration.registration_id"), nullable=False)
    payment_date = Column(DateTime, nullable=False)
    amount = Column(Integer, nullable=False, default=0)
    payment_method = Column(String(50))
    reference_number = Column(String(64), unique=True, nullable=False)
    proof_url = Column(String(500))
    status = Column(String(20), nullable=False, default=PAYMENT_UNPAID)
    verified_by = Column(Integer, ForeignKey("users.user_id"), nullable=True)
    verified_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    registration = relationship("Registration", back_populates="payments")
    verifier = relationship("User")
