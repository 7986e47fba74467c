"""Fee ledger. Append-only: every submission is a new row, no natural uniqueness."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from edumanage.db.session import Base


class StudentFee(Base):
    __tablename__ = "student_fees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    admission_number = Column(
        String(255),
        ForeignKey("students.admission_number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    academic_year = Column(String(20), nullable=False, index=True)
    semester = Column(Integer, nullable=False)
    total_fees = Column(Integer, nullable=False)
    paid_amount = Column(Integer, nullable=False)
    due_amount = Column(Integer, nullable=False)
    status = Column(String(10), nullable=False)  # Paid, Partial, Due
    payment_date = Column(DateTime(timezone=True), nullable=True)
    program_code = Column(String(20), nullable=True)
    admission_type = Column(String(255), nullable=True)
    fee_type = Column(String(50), nullable=True, default="Tuition")

    student = relationship("Student", back_populates="fees")
