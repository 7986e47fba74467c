"""Student master record. Admission number is the natural key used by every child table."""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from edumanage.db.session import Base


class Student(Base):
    __tablename__ = "students"

    admission_number = Column(String(255), primary_key=True)
    college_code = Column(String(10), nullable=False, index=True)
    program_code = Column(String(10), nullable=False)
    roll_no = Column(String(10), nullable=False)
    student_name = Column(String(255), nullable=False)
    gender = Column(String(1), nullable=False)
    is_placed = Column(Boolean, nullable=False, default=False)
    mobile_number = Column(String(20), nullable=True)
    father_mobile_number = Column(String(20), nullable=True)

    marks = relationship("StudentMark", back_populates="student", passive_deletes=True)
    attendance = relationship("StudentAttendance", back_populates="student", passive_deletes=True)
    fees = relationship("StudentFee", back_populates="student", passive_deletes=True)
    placement = relationship("PlacementDetail", back_populates="student", uselist=False, passive_deletes=True)
