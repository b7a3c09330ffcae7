'''Methods corresponding to user management operations'''

from typing import Any, Mapping

from client.authz.gate import PermissionGate
from client.communication import utils
from client.communication.requests import BackendRequests
from client.operations.utils import authorize

from models.constants import REQUEST_CONSTANTS
from models.permissions import GatedAction
from models.records import UserDetails
from models.response_models import ResponseEnvelope

__all__ = ('fetch_users',
           'add_user',
           'update_user',
           'delete_user')

async def fetch_users(requests: BackendRequests) -> list[UserDetails]:
    endpoint: str = REQUEST_CONSTANTS.endpoints.users
    envelope: ResponseEnvelope = await requests.request('GET', endpoint)
    utils.expect_success(envelope, requests.client_config.unknown_request_message)
    return utils.parse_data(envelope, list[UserDetails], endpoint)

async def add_user(requests: BackendRequests, gate: PermissionGate, user: UserDetails, password: str) -> ResponseEnvelope:
    await authorize(requests, gate, GatedAction.ADD_USER)
    if not password:
        raise ValueError('New users require a password')

    body: dict[str, Any] = user.model_dump()
    body.update(id=-1, password=password)
    envelope: ResponseEnvelope = await requests.request('POST', REQUEST_CONSTANTS.endpoints.users, body=body)
    return utils.expect_success(envelope, requests.client_config.unknown_request_message)

async def update_user(requests: BackendRequests, gate: PermissionGate, user_id: int, updates: Mapping[str, Any]) -> ResponseEnvelope:
    '''Patch a user record. A principal may edit its own record with the self-update capability alone'''
    await authorize(requests, gate, GatedAction.UPDATE_USER, on_self=(user_id == gate.principal.id))
    envelope: ResponseEnvelope = await requests.request('PATCH', REQUEST_CONSTANTS.endpoints.user,
                                                        body=dict(updates),
                                                        user_id=user_id)
    return utils.expect_success(envelope, requests.client_config.unknown_request_message)

async def delete_user(requests: BackendRequests, gate: PermissionGate, user_id: int) -> ResponseEnvelope:
    await authorize(requests, gate, GatedAction.DELETE_USER)
    envelope: ResponseEnvelope = await requests.request('DELETE', REQUEST_CONSTANTS.endpoints.user, user_id=user_id)
    return utils.expect_success(envelope, requests.client_config.unknown_request_message)
