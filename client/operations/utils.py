'''Auxillary functions for client operations'''
from client.authz.gate import PermissionGate
from client.communication.requests import BackendRequests
from client.errors import AuthorizationDenied
from client.logging import make_log
from client.message_strings import general_messages

from models.activity_log import LogAuthor, LogType, Severity
from models.permissions import GatedAction

__all__ = ('authorize',)

async def authorize(requests: BackendRequests, gate: PermissionGate, action: GatedAction, *, on_self: bool = False) -> None:
    '''Check `action` against the gate before anything is dispatched, logging denials'''
    try:
        gate.require(action, on_self=on_self)
    except AuthorizationDenied:
        if requests.logger:
            await requests.logger.enqueue_log(make_log(LogAuthor.PERMISSION_GATE, LogType.PERMISSION,
                                                       general_messages.authorization_denied(action.value, gate.principal.email),
                                                       severity=Severity.NON_CRITICAL_FAILURE,
                                                       user_concerned=gate.principal.email))
        raise
