from edumanage.core.models.student import Student
from edumanage.core.models.student_mark import StudentMark
from edumanage.core.models.student_attendance import StudentAttendance
from edumanage.core.models.student_fee import StudentFee
from edumanage.core.models.placement_detail import PlacementDetail
from edumanage.core.models.deleted_data_log import DeletedDataLog
from edumanage.core.models.gps_anchor import UserGpsAnchor

__all__ = [
    "Student",
    "StudentMark",
    "StudentAttendance",
    "StudentFee",
    "PlacementDetail",
    "DeletedDataLog",
    "UserGpsAnchor",
]
