from pydantic import BaseModel, Field
from typing import Annotated, Optional
from datetime import datetime
from enum import Enum, IntFlag

__all__ = ('Severity', 'LogType', 'LogAuthor', 'ActivityLog')

class Severity(IntFlag):
    INFO                    = 1
    TRACE                   = 2
    ERROR                   = 3
    NON_CRITICAL_FAILURE    = 4
    CRITICAL_FAILURE        = 5

class LogType(Enum):
    USER                = 'user'
    SESSION             = 'session'
    REQUEST             = 'request'
    NETWORK             = 'network'
    INTERNAL            = 'internal'
    PERMISSION          = 'permission'
    ATTENDANCE          = 'attendance'
    UNKNOWN             = 'unknown'

class LogAuthor(Enum):
    BOOTUP_HANDLER      = 'bootup_handler'
    REQUEST_LAYER       = 'request_layer'
    PERMISSION_GATE     = 'permission_gate'
    EDIT_SESSION        = 'edit_session'
    RECONCILER          = 'reconciler'
    LOGGER              = 'logger'
    EXCEPTION_FALLBACK  = 'exception_fallback'


class ActivityLog(BaseModel):
    '''Single entry of the client activity log, written out as one JSON line'''
    occurance_time: Annotated[datetime, Field(frozen=True, default_factory=datetime.now)]
    severity: Annotated[int, Field(le=5, ge=1, default=1)]
    logged_by: Annotated[LogAuthor, Field(default=LogAuthor.EXCEPTION_FALLBACK)]
    log_category: Annotated[LogType, Field(default=LogType.UNKNOWN)]
    log_details: Annotated[Optional[str], Field(max_length=512, default=None)]
    user_concerned: Annotated[Optional[str], Field(max_length=128, default=None)]
