'''Module for defining schema of incoming responses'''
from datetime import datetime
from typing import Annotated, Any, Optional

from models.catalog import CatalogEntry
from models.constants import REQUEST_CONSTANTS
from models.records import AttendanceRecord, Principal

from pydantic import BaseModel, ConfigDict, Field

__all__ = ('ResponseEnvelope',
           'EnumPayload',
           'AttendanceEntry',
           'LoginData')

class ResponseEnvelope(BaseModel):
    '''Status/result union returned by every backend call.

    Successful calls carry `status` and `data`; rejected calls carry a
    `message`, or a `detail` when the rejection comes from request validation.
    '''
    model_config = ConfigDict(extra='allow')

    status: Optional[int] = Field(default=None)
    data: Any = Field(default=None)
    message: Optional[str] = Field(default=None)
    detail: Any = Field(default=None)

    @property
    def succeeded(self) -> bool:
        return self.status == REQUEST_CONSTANTS.success_status

    @property
    def rejection_message(self) -> Optional[str]:
        '''Business-level message of a failed call, `None` when there is nothing to interpret'''
        if self.succeeded:
            return None
        if self.message:
            return self.message
        if self.detail:
            return self.detail if isinstance(self.detail, str) else str(self.detail)
        return None

class EnumPayload(BaseModel):
    enum_items: Annotated[list[CatalogEntry], Field(max_length=REQUEST_CONSTANTS.max_items)]

class AttendanceEntry(BaseModel):
    email: str
    forename: Annotated[str, Field(default='')]
    surname: Annotated[str, Field(default='')]
    attendance_type: Annotated[int, Field(ge=0)]

    def to_record(self, session_id: int) -> AttendanceRecord:
        return AttendanceRecord(session_id=session_id,
                                user_email=self.email,
                                attendance_type_bits=self.attendance_type,
                                display_name=f'{self.forename} {self.surname}'.strip())

class LoginData(BaseModel):
    user_id: int
    user_forename: Annotated[str, Field(default='')]
    user_surname: Annotated[str, Field(default='')]
    user_email: str
    permissions: Annotated[int, Field(ge=0, default=0)]
    expires: Optional[datetime] = Field(default=None)

    def to_principal(self) -> Principal:
        return Principal(id=self.user_id, email=self.user_email, granted_bits=self.permissions)
