from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from edumanage.db.session import Base


class StudentMark(Base):
    """One score per subject per semester per student; re-uploads replace the row."""

    __tablename__ = "student_marks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    admission_number = Column(
        String(255),
        ForeignKey("students.admission_number", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    semester = Column(Integer, nullable=False, index=True)
    subject_code = Column(String(50), nullable=False)
    subject_name = Column(String(255), nullable=False)
    marks_obtained = Column(Integer, nullable=False)
    max_marks = Column(Integer, nullable=False)
    internal_mark = Column(Integer, nullable=True)
    external_mark = Column(Integer, nullable=True)

    student = relationship("Student", back_populates="marks")
