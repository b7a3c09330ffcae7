'''Typing utilities for common client models'''
from typing import Awaitable, Callable, Mapping, Optional, Protocol, TypeAlias

from models.records import AttendanceRecord, ChangeEntry
from models.response_models import ResponseEnvelope

__all__ = ('Transport', 'UpdateCallable', 'PhaseCallable', 'AttendanceMapping')

class Transport(Protocol):
    '''Carrier of a single backend call, returning the raw JSON body of the response'''
    async def __call__(self, method: str, url: str, *,
                       token: Optional[str] = None,
                       body: Optional[bytes] = None,
                       content_type: str = 'application/json') -> bytes: ...

UpdateCallable:     TypeAlias = Callable[[ChangeEntry], Awaitable[ResponseEnvelope]]
PhaseCallable:      TypeAlias = Callable[[], Awaitable[ResponseEnvelope]]
AttendanceMapping:  TypeAlias = Mapping[str, AttendanceRecord]
