from typing import Final, Iterable, Optional

from models.records import ChangeEntry

__all__ = ('UNKNOWN_UPDATE_FAILURE', 'UNKNOWN_SESSION_UPDATE_FAILURE', 'UNKNOWN_ATTENDANCE_FETCH_FAILURE', 'UNKNOWN_SIGNUP_FAILURE',
           'join_messages', 'failed_attendance_update', 'reconciled_batch', 'signup_label',
           'edit_session_opened', 'edit_session_closed', 'signup_toggled')

UNKNOWN_UPDATE_FAILURE: Final[str] = 'Unable to update the attendance of a user'
UNKNOWN_SESSION_UPDATE_FAILURE: Final[str] = 'Unable to update training session'
UNKNOWN_ATTENDANCE_FETCH_FAILURE: Final[str] = 'Unable to get attendance'
UNKNOWN_SIGNUP_FAILURE: Final[str] = 'Unable to update attendance'

def join_messages(messages: Iterable[str], separator: str = '; ') -> str:
    return separator.join(message for message in messages if message)

def failed_attendance_update(entry: Optional[ChangeEntry], message: str) -> str:
    if entry is None:
        return f'Failed to update training session: {message}'
    return f'Failed to set attendance of {entry.user_email} in session {entry.session_id} to {entry.new_attendance_type_bits:#b}: {message}'

def reconciled_batch(session_id: Optional[int], applied: int, failed: int) -> str:
    target: str = f'session {session_id}' if session_id is not None else 'batch'
    return f'Reconciled attendance for {target}: {applied} applied, {failed} not applied'

def signup_label(attendance_name: Optional[str]) -> str:
    return {
        'signed_up' : 'Attending',
        'no_longer_attending' : 'Not Attending',
        'attended' : 'Attended',
        'no_show' : 'No Show',
    }.get(attendance_name or '', 'Not Attending')

def edit_session_opened(session_id: int, record_count: int) -> str:
    return f'Opened attendance editing for session {session_id} with {record_count} record(s)'

def edit_session_closed(session_id: int, state: str) -> str:
    return f'Attendance editing for session {session_id} closed as {state}'

def signup_toggled(session_id: int, label: str) -> str:
    return f'Sign-up for session {session_id} is now {label}'
