'''Module for defining schema of records held and edited by the client'''
from datetime import datetime
from typing import Annotated, Optional

from models.constants import REQUEST_CONSTANTS

from pydantic import BaseModel, ConfigDict, Field

__all__ = ('Principal',
           'AttendanceRecord',
           'ChangeEntry',
           'TrainingSession',
           'UserDetails',
           'UserSessionAttendance')

class Principal(BaseModel):
    id: Annotated[int, Field(frozen=True)]
    email: Annotated[Optional[str], Field(frozen=True, default=None)]
    granted_bits: Annotated[int, Field(frozen=True, ge=0, default=0)]

class AttendanceRecord(BaseModel):
    session_id: Annotated[int, Field(frozen=True)]
    user_email: Annotated[str, Field(frozen=True, pattern=REQUEST_CONSTANTS.email_regex)]
    attendance_type_bits: Annotated[int, Field(frozen=True, ge=0)]
    display_name: Annotated[str, Field(frozen=True, default='')]

class ChangeEntry(BaseModel):
    user_email: Annotated[str, Field(frozen=True)]
    session_id: Annotated[int, Field(frozen=True)]
    new_attendance_type_bits: Annotated[int, Field(frozen=True, ge=0)]

class TrainingSession(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Annotated[int, Field(frozen=True)]
    created: Annotated[Optional[datetime], Field(default=None)]
    scheduled_for: Annotated[datetime, Field(alias='datetime')]

class UserDetails(BaseModel):
    id: Annotated[int, Field(frozen=True, default=-1)]
    email: Annotated[str, Field(pattern=REQUEST_CONSTANTS.email_regex)]
    forename: str
    surname: str
    permissions: Annotated[int, Field(ge=0, default=0)]

class UserSessionAttendance(BaseModel):
    training_session_id: Annotated[int, Field(frozen=True)]
    user_attendance_type: Annotated[Optional[int], Field(ge=0, default=None)]
