'''Methods corresponding to training session and attendance operations'''

from datetime import datetime
from typing import Optional

from client.authz.gate import PermissionGate
from client.communication import utils
from client.communication.requests import BackendRequests
from client.operations.utils import authorize

from models.constants import REQUEST_CONSTANTS
from models.permissions import GatedAction
from models.records import AttendanceRecord, ChangeEntry, TrainingSession, UserSessionAttendance
from models.response_models import AttendanceEntry, ResponseEnvelope

__all__ = ('fetch_training_sessions',
           'add_training_session',
           'request_training_session_update',
           'update_training_session',
           'delete_training_session',
           'fetch_session_attendance',
           'fetch_user_attendance',
           'request_attendance_update',
           'update_attendance')

async def fetch_training_sessions(requests: BackendRequests) -> list[TrainingSession]:
    endpoint: str = REQUEST_CONSTANTS.endpoints.training_sessions
    envelope: ResponseEnvelope = await requests.request('GET', endpoint)
    utils.expect_success(envelope, requests.client_config.unknown_request_message)
    return utils.parse_data(envelope, list[TrainingSession], endpoint)

async def add_training_session(requests: BackendRequests, gate: PermissionGate, scheduled_for: datetime) -> ResponseEnvelope:
    await authorize(requests, gate, GatedAction.ADD_TRAINING_SESSION)
    envelope: ResponseEnvelope = await requests.request('POST', REQUEST_CONSTANTS.endpoints.training_sessions,
                                                        body={'datetime' : scheduled_for.isoformat()})
    return utils.expect_success(envelope, requests.client_config.unknown_request_message)

async def request_training_session_update(requests: BackendRequests, session_id: int, scheduled_for: datetime) -> ResponseEnvelope:
    '''Send the metadata update of a training session and return its envelope unclassified'''
    return await requests.request('PATCH', REQUEST_CONSTANTS.endpoints.training_session,
                                  body={'datetime' : scheduled_for.isoformat()},
                                  session_id=session_id)

async def update_training_session(requests: BackendRequests, gate: PermissionGate, session_id: int, scheduled_for: datetime) -> ResponseEnvelope:
    await authorize(requests, gate, GatedAction.UPDATE_TRAINING_SESSION)
    envelope: ResponseEnvelope = await request_training_session_update(requests, session_id, scheduled_for)
    return utils.expect_success(envelope, requests.client_config.unknown_session_update_message)

async def delete_training_session(requests: BackendRequests, gate: PermissionGate, session_id: int) -> ResponseEnvelope:
    await authorize(requests, gate, GatedAction.DELETE_TRAINING_SESSION)
    envelope: ResponseEnvelope = await requests.request('DELETE', REQUEST_CONSTANTS.endpoints.training_session, session_id=session_id)
    return utils.expect_success(envelope, requests.client_config.unknown_request_message)

async def fetch_session_attendance(requests: BackendRequests, session_id: int) -> list[AttendanceRecord]:
    '''Fetch every attendance record of a session, in the order served'''
    endpoint: str = REQUEST_CONSTANTS.endpoints.session_attendance
    envelope: ResponseEnvelope = await requests.request('GET', endpoint, session_id=session_id)
    utils.expect_success(envelope, requests.client_config.unknown_request_message)
    return utils.parse_data(envelope, list[AttendanceEntry], endpoint,
                            convert=lambda entries: [entry.to_record(session_id) for entry in entries])

async def fetch_user_attendance(requests: BackendRequests, user_id: int) -> list[UserSessionAttendance]:
    endpoint: str = REQUEST_CONSTANTS.endpoints.user_attendance
    envelope: ResponseEnvelope = await requests.request('GET', endpoint, user_id=user_id)
    utils.expect_success(envelope, requests.client_config.unknown_request_message)
    return utils.parse_data(envelope, list[UserSessionAttendance], endpoint)

async def request_attendance_update(requests: BackendRequests, entry: ChangeEntry) -> ResponseEnvelope:
    return await requests.request('POST', REQUEST_CONSTANTS.endpoints.attendance_update,
                                  session_id=entry.session_id,
                                  user_email=entry.user_email,
                                  attendance=entry.new_attendance_type_bits)

async def update_attendance(requests: BackendRequests, entry: ChangeEntry, unknown_message: Optional[str] = None) -> ResponseEnvelope:
    envelope: ResponseEnvelope = await request_attendance_update(requests, entry)
    return utils.expect_success(envelope, unknown_message or requests.client_config.unknown_update_message)
