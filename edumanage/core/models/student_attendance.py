from sqlalchemy import Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from edumanage.db.session import Base


class StudentAttendance(Base):
    """Student attendance: one row per student per day, two half-day slots."""

    __tablename__ = "student_attendance"
    __table_args__ = (
        UniqueConstraint("admission_number", "date", name="uq_student_attendance_day"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    admission_number = Column(
        String(255),
        ForeignKey("students.admission_number", ondelete="CASCADE"),
        nullable=False,
    )
    date = Column(Date, nullable=False, index=True)
    morning = Column(String(10), nullable=False)  # Present, Absent
    afternoon = Column(String(10), nullable=False)  # Present, Absent

    student = relationship("Student", back_populates="attendance")
