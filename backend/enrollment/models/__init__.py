"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from enrollment.models.user import User, Participant, Instructor
from enrollment.models.course import Course, TrainingClass
from enrollment.models.registration import Registration, ValueReport
from enrollment.models.payment import Payment
from enrollment.models.certificate import Certificate
from enrollment.models.notification import Notification

__all__ = [
    "User", "Participant", "Instructor",
    "Course", "TrainingClass",
    "Registration", "ValueReport",
    "Payment",
    "Certificate",
    "Notification",
]
