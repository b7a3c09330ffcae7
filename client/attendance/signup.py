'''Personal sign-up toggle of the logged in user for a training session'''
from datetime import datetime, timezone
from typing import Final, Optional

from client.authz.permissions import has_permission
from client.communication.requests import BackendRequests
from client.logging import make_log
from client.message_strings import attendance_messages
from client.operations import session_operations

from models.activity_log import LogAuthor, LogType
from models.catalog import CapabilityCatalog
from models.constants import CATALOG_CONSTANTS
from models.records import ChangeEntry, Principal, TrainingSession

__all__ = ('attendance_state', 'signup_label', 'next_signup_bits', 'session_in_past', 'can_toggle_signup', 'toggle_signup')

# Checked in order, the first matching type wins
ATTENDANCE_STATES: Final[tuple[str, ...]] = ('signed_up', 'no_longer_attending', 'attended', 'no_show')

TOGGLES: Final[dict[str, str]] = {
    'signed_up' : 'no_longer_attending',
    'no_longer_attending' : 'signed_up',
}

def attendance_state(catalog: CapabilityCatalog, attendance_type_bits: Optional[int]) -> Optional[str]:
    '''Name of the attendance state that `attendance_type_bits` holds, `None` when there is no record or no match'''
    for state in ATTENDANCE_STATES:
        bit: Optional[int] = catalog.resolve(getattr(CATALOG_CONSTANTS.attendance, state))
        if bit is not None and has_permission(attendance_type_bits or 0, {bit}):
            return state
    return None

def signup_label(catalog: CapabilityCatalog, attendance_type_bits: Optional[int]) -> str:
    return attendance_messages.signup_label(attendance_state(catalog, attendance_type_bits))

def next_signup_bits(catalog: CapabilityCatalog, attendance_type_bits: Optional[int]) -> Optional[int]:
    '''Bits the toggle moves to, `None` when the current state offers no toggle'''
    target: Optional[str] = TOGGLES.get(attendance_state(catalog, attendance_type_bits) or '')
    if target is None:
        return None
    return catalog.resolve(getattr(CATALOG_CONSTANTS.attendance, target))

def session_in_past(training_session: TrainingSession, now: Optional[datetime] = None) -> bool:
    scheduled_for: datetime = training_session.scheduled_for
    now = now or datetime.now(timezone.utc)
    # naive datetimes from the backend are UTC
    if scheduled_for.tzinfo is None:
        scheduled_for = scheduled_for.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return scheduled_for < now

def can_toggle_signup(catalog: CapabilityCatalog, training_session: TrainingSession,
                      attendance_type_bits: Optional[int], now: Optional[datetime] = None) -> bool:
    return not session_in_past(training_session, now) and next_signup_bits(catalog, attendance_type_bits) is not None

async def toggle_signup(requests: BackendRequests, catalog: CapabilityCatalog, training_session: TrainingSession,
                        attendance_type_bits: Optional[int], now: Optional[datetime] = None) -> int:
    '''Flip the logged in user between signed up and no longer attending.

    Returns the new attendance bits. Raises `ValueError` when the session is in
    the past or the current state has no toggle, and `BusinessRejection` or
    `TransportFailure` when the update is not applied.
    '''
    if session_in_past(training_session, now):
        raise ValueError(f'Training session {training_session.id} has already taken place')
    new_bits: Optional[int] = next_signup_bits(catalog, attendance_type_bits)
    if new_bits is None:
        raise ValueError(f'No sign-up toggle from attendance {attendance_type_bits!r}')

    principal: Principal = requests.session_manager.current_principal()
    if not principal.email:
        raise ValueError('Logged in principal has no email')

    await session_operations.update_attendance(requests,
                                               ChangeEntry(user_email=principal.email,
                                                           session_id=training_session.id,
                                                           new_attendance_type_bits=new_bits),
                                               unknown_message=attendance_messages.UNKNOWN_SIGNUP_FAILURE)
    if requests.logger:
        await requests.logger.enqueue_log(make_log(LogAuthor.EDIT_SESSION, LogType.ATTENDANCE,
                                                   attendance_messages.signup_toggled(training_session.id, signup_label(catalog, new_bits)),
                                                   user_concerned=principal.email))
    return new_bits
