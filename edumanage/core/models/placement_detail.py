from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from edumanage.db.session import Base


class PlacementDetail(Base):
    """Placement details, at most one per student."""

    __tablename__ = "placement_details"

    id = Column(Integer, primary_key=True, autoincrement=True)
    admission_number = Column(
        String(255),
        ForeignKey("students.admission_number", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    company_name = Column(String(255), nullable=False)
    hr_name = Column(String(255), nullable=True)
    hr_mobile_number = Column(String(20), nullable=True)
    student_mobile_number = Column(String(20), nullable=True)
    year = Column(String(20), nullable=True)
    semester = Column(String(10), nullable=True)
    academic_year = Column(String(20), nullable=True)
    hr_email = Column(String(255), nullable=True)

    student = relationship("Student", back_populates="placement")
