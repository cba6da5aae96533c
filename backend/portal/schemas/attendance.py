"""
Schémas Pydantic pour le suivi des présences (absences, retards).
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel

from portal.schemas.common import AttendanceStatus


class AttendanceCreate(BaseModel):
    student_id: int
    date: dt.date
    status: AttendanceStatus
    justification: Optional[str] = None


class AttendanceResponse(BaseModel):
    id: int
    student_id: int
    date: dt.date
    status: AttendanceStatus
    justification: Optional[str] = None

    model_config = {"from_attributes": True}
