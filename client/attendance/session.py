'''Lifecycle of a single attendance editing session, from baseline fetch to reconciled submit'''
import asyncio
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Final, Optional

from client.attendance.editing import AttendanceSnapshot
from client.attendance.reconciler import AggregatedResult, reconcile_phases
from client.authz.gate import PermissionGate
from client.communication.requests import BackendRequests
from client.errors import InvalidSessionState, UnknownCapability
from client.logging import make_log
from client.message_strings import attendance_messages
from client.operations import session_operations
from client.operations.utils import authorize

from models.activity_log import LogAuthor, LogType, Severity
from models.catalog import CapabilityCatalog
from models.constants import CATALOG_CONSTANTS
from models.permissions import GatedAction
from models.records import AttendanceRecord, ChangeEntry, TrainingSession
from models.typing import PhaseCallable

__all__ = ('EditState', 'AttendanceEditSession')

class EditState(Enum):
    IDLE                = 'idle'
    LOADING             = 'loading'
    EDITING             = 'editing'
    SUBMITTING          = 'submitting'
    CLOSED_SUCCESS      = 'closed_success'
    CLOSED_WITH_ERRORS  = 'closed_with_errors'
    CANCELLED           = 'cancelled'

CLOSED_STATES: Final[frozenset[EditState]] = frozenset({EditState.CLOSED_SUCCESS, EditState.CLOSED_WITH_ERRORS, EditState.CANCELLED})

class AttendanceEditSession:
    '''Edits the attendance of one training session against a baseline fetched when editing begins.

    A session is single use: once submitted or cancelled its snapshot is
    discarded, and retrying requires a fresh `AttendanceEditSession`.
    '''
    __slots__ = ('_requests', '_gate', '_attendance_catalog', '_training_session',
                 '_state', '_snapshot', '_result')

    def __init__(self, requests: BackendRequests, gate: PermissionGate,
                 attendance_catalog: CapabilityCatalog, training_session: TrainingSession):
        self._requests: Final[BackendRequests] = requests
        self._gate: Final[PermissionGate] = gate
        self._attendance_catalog: Final[CapabilityCatalog] = attendance_catalog
        self._training_session: Final[TrainingSession] = training_session

        self._state: EditState = EditState.IDLE
        self._snapshot: Optional[AttendanceSnapshot] = None
        self._result: Optional[AggregatedResult] = None

    @property
    def state(self) -> EditState:
        return self._state
    @property
    def training_session(self) -> TrainingSession:
        return self._training_session
    @property
    def result(self) -> Optional[AggregatedResult]:
        return self._result
    @property
    def snapshot(self) -> AttendanceSnapshot:
        self._ensure_state(EditState.EDITING)
        assert self._snapshot
        return self._snapshot

    def _ensure_state(self, *allowed: EditState) -> None:
        if self._state not in allowed:
            raise InvalidSessionState(self._state.value)

    async def _log(self, details: str, severity: Severity = Severity.INFO, user_concerned: Optional[str] = None) -> None:
        if self._requests.logger:
            await self._requests.logger.enqueue_log(make_log(LogAuthor.EDIT_SESSION, LogType.ATTENDANCE, details,
                                                             severity=severity, user_concerned=user_concerned))

    def _close(self, state: EditState) -> None:
        self._state = state
        self._snapshot = None

    async def load(self) -> AttendanceSnapshot:
        '''Fetch the session's attendance and freeze it as the baseline. A failed fetch leaves the session idle'''
        self._ensure_state(EditState.IDLE)
        self._state = EditState.LOADING
        try:
            records: list[AttendanceRecord] = await session_operations.fetch_session_attendance(self._requests, self._training_session.id)
            self._snapshot = AttendanceSnapshot(self._training_session.id, records)
        except asyncio.CancelledError:
            self._close(EditState.CANCELLED)
            raise
        except Exception as e:
            self._state = EditState.IDLE
            await self._log(f'{attendance_messages.UNKNOWN_ATTENDANCE_FETCH_FAILURE}: {e}', Severity.ERROR)
            raise

        self._state = EditState.EDITING
        await self._log(attendance_messages.edit_session_opened(self._training_session.id, len(self._snapshot)))
        return self._snapshot

    def set_attendance(self, user_email: str, attendance_type_bits: int) -> AttendanceRecord:
        return self.snapshot.set_attendance(user_email, attendance_type_bits)

    def mark_attended(self, user_email: str, attended: bool) -> AttendanceRecord:
        '''Set a record to the attended or no-show type, as resolved from the attendance catalog'''
        name: str = CATALOG_CONSTANTS.attendance.attended if attended else CATALOG_CONSTANTS.attendance.no_show
        bit: Optional[int] = self._attendance_catalog.resolve(name)
        if bit is None:
            raise UnknownCapability(name)
        return self.set_attendance(user_email, bit)

    def changes(self) -> list[ChangeEntry]:
        return self.snapshot.changes()

    async def submit(self, scheduled_for: Optional[datetime] = None) -> AggregatedResult:
        '''Apply the session's edits to the remote store and close the session.

        The principal must be allowed to update training sessions, otherwise
        `AuthorizationDenied` is raised before any call and the session stays
        open for editing. A new `scheduled_for` is sent as a prior phase; its
        failure does not prevent the attendance batch.
        '''
        self._ensure_state(EditState.EDITING)
        await authorize(self._requests, self._gate, GatedAction.UPDATE_TRAINING_SESSION)

        assert self._snapshot
        changes: list[ChangeEntry] = self._snapshot.changes()
        prior_phase: Optional[PhaseCallable] = None
        if scheduled_for is not None and scheduled_for != self._training_session.scheduled_for:
            prior_phase = partial(session_operations.request_training_session_update,
                                  self._requests, self._training_session.id, scheduled_for)

        self._state = EditState.SUBMITTING
        client_config = self._requests.client_config
        try:
            result: AggregatedResult = await reconcile_phases(prior_phase, changes,
                                                              partial(session_operations.request_attendance_update, self._requests),
                                                              prior_unknown_message=client_config.unknown_session_update_message,
                                                              unknown_message=client_config.unknown_update_message,
                                                              logger=self._requests.logger)
        except asyncio.CancelledError:
            self._close(EditState.CANCELLED)
            raise

        self._result = result
        self._close(EditState.CLOSED_SUCCESS if result.succeeded else EditState.CLOSED_WITH_ERRORS)
        await self._log(attendance_messages.edit_session_closed(self._training_session.id, self._state.value),
                        Severity.INFO if result.succeeded else Severity.NON_CRITICAL_FAILURE)
        return result

    def error_message(self) -> str:
        '''Display form of the last submit's failures, empty when there were none'''
        if not self._result:
            return ''
        return self._result.error_message(self._requests.client_config.message_separator)

    def cancel(self) -> None:
        '''Abandon the session, discarding every local edit. Nothing is sent'''
        self._ensure_state(EditState.IDLE, EditState.EDITING)
        self._close(EditState.CANCELLED)
