import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from client.attendance import signup
from client.errors import BusinessRejection, TransportFailure

from models.records import TrainingSession

from tests.conftest import ATTENDANCE_TYPES

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
UPCOMING = TrainingSession(id=5, scheduled_for=NOW + timedelta(days=2))
FINISHED = TrainingSession(id=4, scheduled_for=NOW - timedelta(days=2))

@pytest.mark.parametrize(('bits', 'label', 'next_bits'), [
    (ATTENDANCE_TYPES['Signed Up'], 'Attending', ATTENDANCE_TYPES['No Longer Attending']),
    (ATTENDANCE_TYPES['No Longer Attending'], 'Not Attending', ATTENDANCE_TYPES['Signed Up']),
    (ATTENDANCE_TYPES['Attended'], 'Attended', None),
    (ATTENDANCE_TYPES['No Show'], 'No Show', None),
    (None, 'Not Attending', None),
])
def test_labels_and_transitions(attendance_catalog, bits, label, next_bits):
    assert signup.signup_label(attendance_catalog, bits) == label
    assert signup.next_signup_bits(attendance_catalog, bits) == next_bits

def test_signed_up_takes_precedence_over_other_bits(attendance_catalog):
    assert signup.attendance_state(attendance_catalog, 0b0101) == 'signed_up'

def test_past_sessions_cannot_be_toggled(attendance_catalog):
    assert signup.can_toggle_signup(attendance_catalog, UPCOMING, ATTENDANCE_TYPES['Signed Up'], NOW)
    assert not signup.can_toggle_signup(attendance_catalog, FINISHED, ATTENDANCE_TYPES['Signed Up'], NOW)
    assert not signup.can_toggle_signup(attendance_catalog, UPCOMING, ATTENDANCE_TYPES['Attended'], NOW)

def test_naive_datetimes_are_treated_as_utc():
    naive = TrainingSession(id=6, scheduled_for=datetime(2024, 6, 1, 11, 0))
    assert signup.session_in_past(naive, NOW)

def test_toggle_updates_own_attendance(make_requests, attendance_catalog):
    requests, transport = make_requests()
    new_bits = asyncio.run(signup.toggle_signup(requests, attendance_catalog, UPCOMING, ATTENDANCE_TYPES['Signed Up'], NOW))
    assert new_bits == ATTENDANCE_TYPES['No Longer Attending']
    assert transport.calls[0].query == {'session_id' : '5', 'user_email' : 'coach@example.com', 'attendance' : '2'}

def test_toggle_refuses_without_calls(make_requests, attendance_catalog):
    requests, transport = make_requests()
    with pytest.raises(ValueError):
        asyncio.run(signup.toggle_signup(requests, attendance_catalog, FINISHED, ATTENDANCE_TYPES['Signed Up'], NOW))
    with pytest.raises(ValueError):
        asyncio.run(signup.toggle_signup(requests, attendance_catalog, UPCOMING, ATTENDANCE_TYPES['No Show'], NOW))
    assert transport.calls == []

def test_toggle_failures_are_raised(make_requests, attendance_catalog):
    requests, _ = make_requests(lambda call: {'message' : 'Session is full'})
    with pytest.raises(BusinessRejection, match='Session is full'):
        asyncio.run(signup.toggle_signup(requests, attendance_catalog, UPCOMING, ATTENDANCE_TYPES['No Longer Attending'], NOW))

    requests, _ = make_requests(lambda call: {})
    with pytest.raises(TransportFailure, match='Unable to update attendance'):
        asyncio.run(signup.toggle_signup(requests, attendance_catalog, UPCOMING, ATTENDANCE_TYPES['No Longer Attending'], NOW))
