from abc import ABC
from datetime import datetime
from typing import Optional, Sequence, TYPE_CHECKING

from models.response_codes import ClientErrorFlags, RemoteErrorFlags

if TYPE_CHECKING:
    from models.permissions import GatedAction

__all__ = ('AttendanceGateException', 'AuthorizationDenied', 'InvalidAuthenticationState', 'UnknownCapability', 'InvalidCatalog', 'InvalidSessionState', 'TransportFailure', 'MalformedResponse', 'BusinessRejection', 'PartialBatchFailure')

class AttendanceGateException(ABC, Exception):
    '''Abstract base exception class for all client specific exceptions. Carries a code and a human readable description for display'''
    code: str
    description: str
    exception_iso_timestamp: str

    def __init__(self, description: Optional[str] = None):
        self.description = description or self.__class__.description
        self.exception_iso_timestamp = datetime.now().isoformat()
        super().__init__(self.description)


# Local errors, raised before any remote call is made
class AuthorizationDenied(AttendanceGateException):
    code: str = ClientErrorFlags.AUTHORIZATION_DENIED.value
    description: str = 'Insufficient permissions for {action}'

    def __init__(self, action: 'GatedAction', description: Optional[str] = None):
        self.action = action
        super().__init__(description or AuthorizationDenied.description.format(action=action.value))

class InvalidAuthenticationState(AttendanceGateException):
    code: str = ClientErrorFlags.INVALID_AUTH_STATE.value
    description: str = 'Invalid authentication state'

class UnknownCapability(AttendanceGateException):
    code: str = ClientErrorFlags.UNKNOWN_CAPABILITY.value
    description: str = 'Catalog has no entry named {name}'

    def __init__(self, name: str, description: Optional[str] = None):
        self.name = name
        super().__init__(description or UnknownCapability.description.format(name=name))

class InvalidCatalog(AttendanceGateException):
    code: str = ClientErrorFlags.INVALID_CATALOG.value
    description: str = 'Catalog enumeration could not be interpreted'

class InvalidSessionState(AttendanceGateException):
    code: str = ClientErrorFlags.INVALID_SESSION_STATE.value
    description: str = 'Operation not allowed in editing session state {state}'

    def __init__(self, state: str, description: Optional[str] = None):
        self.state = state
        super().__init__(description or InvalidSessionState.description.format(state=state))


# Remote errors
class TransportFailure(AttendanceGateException):
    code: str = RemoteErrorFlags.TRANSPORT_FAILURE.value
    description: str = 'Backend call failed without a response'

class MalformedResponse(TransportFailure):
    code: str = RemoteErrorFlags.MALFORMED_RESPONSE.value
    description: str = 'Backend response could not be interpreted'

class BusinessRejection(AttendanceGateException):
    code: str = RemoteErrorFlags.BUSINESS_REJECTION.value
    description: str = 'Backend rejected the request'

class PartialBatchFailure(AttendanceGateException):
    code: str = RemoteErrorFlags.PARTIAL_BATCH_FAILURE.value
    description: str = '{failed} update(s) not applied, {applied} applied'

    def __init__(self, applied_count: int, messages: Sequence[str], description: Optional[str] = None):
        self.applied_count = applied_count
        self.messages = tuple(messages)
        super().__init__(description or PartialBatchFailure.description.format(failed=len(self.messages), applied=applied_count))
