'''Baseline/working-copy pair of a single attendance editing session, and the diff between them'''
from types import MappingProxyType
from typing import Final, Iterable, Optional

from models.records import AttendanceRecord, ChangeEntry
from models.typing import AttendanceMapping

__all__ = ('AttendanceSnapshot', 'diff_attendance')

def diff_attendance(baseline: AttendanceMapping, working: AttendanceMapping) -> list[ChangeEntry]:
    '''Compute the changes needed to bring the remote store from `baseline` to `working`.

    One entry is emitted per key whose attendance bits differ, in the iteration
    order of `working`. Keys only present in `baseline` have no new value and are
    skipped. Neither mapping is modified.
    '''
    changes: list[ChangeEntry] = []
    for user_email, record in working.items():
        original: Optional[AttendanceRecord] = baseline.get(user_email)
        if original is not None and original.attendance_type_bits == record.attendance_type_bits:
            continue
        changes.append(ChangeEntry(user_email=user_email,
                                   session_id=record.session_id,
                                   new_attendance_type_bits=record.attendance_type_bits))
    return changes

class AttendanceSnapshot:
    '''Frozen baseline of a session's attendance and the working copy edited against it'''
    __slots__ = ('_session_id', '_baseline', '_working')

    def __init__(self, session_id: int, records: Iterable[AttendanceRecord]):
        baseline: dict[str, AttendanceRecord] = {}
        for record in records:
            if record.session_id != session_id:
                raise ValueError(f'Record for {record.user_email} belongs to session {record.session_id}, expected {session_id}')
            if record.user_email in baseline:
                raise ValueError(f'Duplicate attendance record for {record.user_email}')
            baseline[record.user_email] = record.model_copy(deep=True)

        self._session_id: Final[int] = session_id
        self._baseline: Final[MappingProxyType[str, AttendanceRecord]] = MappingProxyType(baseline)
        self._working: Final[dict[str, AttendanceRecord]] = {email: record.model_copy(deep=True) for email, record in baseline.items()}

    @property
    def session_id(self) -> int:
        return self._session_id
    @property
    def baseline(self) -> MappingProxyType[str, AttendanceRecord]:
        return self._baseline
    @property
    def working(self) -> MappingProxyType[str, AttendanceRecord]:
        return MappingProxyType(self._working)

    def __len__(self) -> int:
        return len(self._baseline)

    def __contains__(self, user_email: object) -> bool:
        return user_email in self._baseline

    def set_attendance(self, user_email: str, attendance_type_bits: int) -> AttendanceRecord:
        '''Replace the working record of `user_email` with one holding the new attendance bits'''
        try:
            current: AttendanceRecord = self._working[user_email]
        except KeyError:
            raise KeyError(f'No attendance record for {user_email} in session {self._session_id}') from None
        if attendance_type_bits < 0:
            raise ValueError(f'Attendance bits must be non-negative, got {attendance_type_bits}')

        updated = current.model_copy(update={'attendance_type_bits': attendance_type_bits})
        self._working[user_email] = updated
        return updated

    def revert(self, user_email: Optional[str] = None) -> None:
        '''Reset one record, or the whole working copy, back to the baseline'''
        emails: Iterable[str] = (user_email,) if user_email is not None else tuple(self._baseline)
        for email in emails:
            self._working[email] = self._baseline[email].model_copy(deep=True)

    def changes(self) -> list[ChangeEntry]:
        return diff_attendance(self._baseline, self._working)
