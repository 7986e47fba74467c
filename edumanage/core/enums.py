from enum import Enum


ALL_COLLEGES = "ALL"
ALL_SEMESTERS = "All Semesters"
ALL_YEARS = "All Years"


class UploadDataType(str, Enum):
    """Record type tag of a bulk upload."""

    MARKS = "marks"
    FEE = "fee"
    STUDENT_ATTENDANCE = "studentAttendance"


class DataType(str, Enum):
    """Data type tag of an audited delete. Decides the restore destination."""

    MARKS = "marks"
    FEES = "fees"
    EXAM_FEES = "examFees"
    ATTENDANCE = "attendance"


class SlotStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class FeeStatus(str, Enum):
    PAID = "Paid"
    PARTIAL = "Partial"
    DUE = "Due"


class Gender(str, Enum):
    MALE = "M"
    FEMALE = "F"
