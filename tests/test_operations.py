import asyncio
from datetime import datetime, timezone

import orjson
import pytest

from client.authz.gate import PermissionGate
from client.communication import outgoing
from client.errors import AuthorizationDenied, BusinessRejection, InvalidCatalog, MalformedResponse, TransportFailure
from client.operations import auth_operations, catalog_operations, session_operations, user_operations

from models.records import ChangeEntry, Principal, UserDetails

from tests.conftest import ATTENDANCE_TYPES, PERMISSIONS
from tests.fakes import enum_payload, ok

def enum_responder(call):
    if call.path == 'enums/permissions':
        return enum_payload(PERMISSIONS)
    if call.path == 'enums/user_session_attendance':
        return enum_payload(ATTENDANCE_TYPES)
    return {'detail' : 'Not Found'}

def test_both_catalogs_are_fetched(make_requests):
    requests, transport = make_requests(enum_responder)
    permission_catalog, attendance_catalog = asyncio.run(catalog_operations.fetch_catalogs(requests))
    assert dict(permission_catalog) == PERMISSIONS
    assert dict(attendance_catalog) == ATTENDANCE_TYPES
    assert {call.token for call in transport.calls} == {None}

@pytest.mark.parametrize('payload', [
    ok({'items' : []}),
    ok({'enum_items' : [{'name' : 'Administer', 'value' : -1}]}),
    ok({'enum_items' : [{'name' : 'Administer', 'value' : 'one'}]}),
    ok({'enum_items' : [{'name' : 'Administer', 'value' : 0b11}]}),
    ok({'enum_items' : [{'name' : 'Administer', 'value' : 1}, {'name' : 'Add User', 'value' : 1}]}),
])
def test_invalid_enumerations_are_rejected(make_requests, payload):
    requests, _ = make_requests(lambda call: payload)
    with pytest.raises(InvalidCatalog):
        asyncio.run(catalog_operations.fetch_permission_catalog(requests))

def test_rejected_enumeration_fetch_raises(make_requests):
    requests, _ = make_requests(lambda call: {'message' : 'Maintenance'})
    with pytest.raises(BusinessRejection):
        asyncio.run(catalog_operations.fetch_attendance_catalog(requests))

def test_login_authenticates_the_session(make_requests, session_manager):
    session_manager.clear_auth_data()
    login_reply = ok({'user_id' : 3, 'user_forename' : 'Ada', 'user_surname' : 'Lovelace',
                      'user_email' : 'ada@example.com', 'permissions' : 0b101, 'expires' : None},
                     access_token='abc')
    requests, transport = make_requests(lambda call: login_reply)

    principal = asyncio.run(auth_operations.login(requests, 'ada@example.com', 'hunter2'))
    assert principal == Principal(id=3, email='ada@example.com', granted_bits=0b101)
    assert session_manager.bearer_token() == 'abc'
    assert session_manager.display_name == 'Ada Lovelace'

    call = transport.calls[0]
    assert call.method == 'POST' and call.token is None
    assert call.content_type == outgoing.FORM_CONTENT
    assert call.body == b'username=ada%40example.com&password=hunter2'

    auth_operations.logout(requests)
    assert not session_manager.check_authentication_integrity()

def test_login_reply_with_token_and_data_succeeds_without_status(make_requests, session_manager):
    session_manager.clear_auth_data()
    login_reply = {'data' : {'user_id' : 4, 'user_forename' : 'Alan', 'user_surname' : 'Turing',
                             'user_email' : 'alan@example.com', 'permissions' : 0b10},
                   'access_token' : 'xyz'}
    requests, _ = make_requests(lambda call: login_reply)

    principal = asyncio.run(auth_operations.login(requests, 'alan@example.com', 'enigma'))
    assert principal.id == 4 and principal.granted_bits == 0b10
    assert session_manager.bearer_token() == 'xyz'

def test_login_reply_without_token_is_not_a_success(make_requests, session_manager):
    session_manager.clear_auth_data()
    login_reply = {'data' : {'user_id' : 4, 'user_email' : 'alan@example.com', 'permissions' : 0b10}}
    requests, _ = make_requests(lambda call: login_reply)

    with pytest.raises(TransportFailure):
        asyncio.run(auth_operations.login(requests, 'alan@example.com', 'enigma'))
    assert session_manager.token is None

def test_failed_login_leaves_session_unauthenticated(make_requests, session_manager):
    session_manager.clear_auth_data()
    requests, _ = make_requests(lambda call: {'message' : 'Incorrect username or password'})
    with pytest.raises(BusinessRejection, match='Incorrect username or password'):
        asyncio.run(auth_operations.login(requests, 'ada@example.com', 'wrong'))
    assert session_manager.token is None

def test_users_are_listed(make_requests):
    users = [{'id' : 1, 'email' : 'ada@example.com', 'forename' : 'Ada', 'surname' : 'Lovelace', 'permissions' : 1,
              'last_training_date' : None}]
    requests, _ = make_requests(lambda call: ok(users))
    assert asyncio.run(user_operations.fetch_users(requests)) == [UserDetails(id=1, email='ada@example.com', forename='Ada',
                                                                               surname='Lovelace', permissions=1)]

def test_denied_user_operations_make_no_calls(make_requests, permission_catalog):
    requests, transport = make_requests()
    gate = PermissionGate(permission_catalog, Principal(id=1, granted_bits=permission_catalog['Update Self']))
    new_user = UserDetails(email='new@example.com', forename='New', surname='User')

    with pytest.raises(AuthorizationDenied):
        asyncio.run(user_operations.add_user(requests, gate, new_user, 'password'))
    with pytest.raises(AuthorizationDenied):
        asyncio.run(user_operations.update_user(requests, gate, 2, {'forename' : 'Other'}))
    with pytest.raises(AuthorizationDenied):
        asyncio.run(user_operations.delete_user(requests, gate, 2))
    assert transport.calls == []

def test_self_update_is_allowed_with_self_capability(make_requests, permission_catalog):
    requests, transport = make_requests()
    gate = PermissionGate(permission_catalog, Principal(id=1, granted_bits=permission_catalog['Update Self']))
    asyncio.run(user_operations.update_user(requests, gate, 1, {'forename' : 'Me'}))
    assert transport.calls[0].method == 'PATCH'
    assert transport.calls[0].path == 'users/1'

def test_new_users_are_sent_with_placeholder_id(make_requests, permission_catalog):
    requests, transport = make_requests()
    gate = PermissionGate(permission_catalog, Principal(id=1, granted_bits=permission_catalog['Administer']))
    asyncio.run(user_operations.add_user(requests, gate, UserDetails(id=9, email='new@example.com', forename='New', surname='User'), 'pw'))
    assert orjson.loads(transport.calls[0].body) == {'id' : -1, 'email' : 'new@example.com', 'forename' : 'New',
                                                     'surname' : 'User', 'permissions' : 0, 'password' : 'pw'}

def test_training_sessions_are_parsed(make_requests):
    requests, _ = make_requests(lambda call: ok([{'id' : 5, 'created' : '2024-01-01T10:00:00Z', 'datetime' : '2024-02-01T18:30:00Z'}]))
    sessions = asyncio.run(session_operations.fetch_training_sessions(requests))
    assert sessions[0].id == 5
    assert sessions[0].scheduled_for == datetime(2024, 2, 1, 18, 30, tzinfo=timezone.utc)

def test_add_training_session_sends_iso_datetime(make_requests, permission_catalog):
    requests, transport = make_requests()
    gate = PermissionGate(permission_catalog, Principal(id=1, granted_bits=permission_catalog['Add Training Session']))
    asyncio.run(session_operations.add_training_session(requests, gate, datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)))
    assert orjson.loads(transport.calls[0].body) == {'datetime' : '2024-03-01T09:00:00+00:00'}

def test_session_attendance_becomes_records(make_requests):
    entries = [{'email' : 'ada@example.com', 'forename' : 'Ada', 'surname' : 'Lovelace', 'attendance_type' : 1}]
    requests, transport = make_requests(lambda call: ok(entries))
    records = asyncio.run(session_operations.fetch_session_attendance(requests, 7))
    assert transport.calls[0].path == 'training_sessions/attendance/session/7'
    assert records[0].session_id == 7
    assert records[0].display_name == 'Ada Lovelace'

def test_session_attendance_with_invalid_email_is_malformed(make_requests):
    entries = [{'email' : 'not-an-email', 'forename' : 'Ada', 'surname' : 'Lovelace', 'attendance_type' : 1}]
    requests, _ = make_requests(lambda call: ok(entries))
    with pytest.raises(MalformedResponse, match='training_sessions/attendance/session'):
        asyncio.run(session_operations.fetch_session_attendance(requests, 7))

def test_user_attendance_is_listed(make_requests):
    requests, transport = make_requests(lambda call: ok([{'training_session_id' : 5, 'user_attendance_type' : 2}]))
    attendance = asyncio.run(session_operations.fetch_user_attendance(requests, 3))
    assert transport.calls[0].path == 'training_sessions/attendance/user/3'
    assert attendance[0].user_attendance_type == 2

def test_single_attendance_update_raises_on_failure(make_requests):
    change = ChangeEntry(user_email='ada@example.com', session_id=7, new_attendance_type_bits=1)

    requests, _ = make_requests(lambda call: {'message' : 'Session full'})
    with pytest.raises(BusinessRejection, match='Session full'):
        asyncio.run(session_operations.update_attendance(requests, change))

    requests, _ = make_requests(lambda call: {'status' : 500})
    with pytest.raises(TransportFailure, match='Unable to update the attendance of a user'):
        asyncio.run(session_operations.update_attendance(requests, change))
