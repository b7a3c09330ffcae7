import pytest

from client.attendance.editing import AttendanceSnapshot, diff_attendance

from models.records import AttendanceRecord, ChangeEntry

def make_records(session_id: int = 7) -> list[AttendanceRecord]:
    return [AttendanceRecord(session_id=session_id, user_email='ada@example.com', attendance_type_bits=0b0001, display_name='Ada Lovelace'),
            AttendanceRecord(session_id=session_id, user_email='alan@example.com', attendance_type_bits=0b0001, display_name='Alan Turing'),
            AttendanceRecord(session_id=session_id, user_email='grace@example.com', attendance_type_bits=0b0010, display_name='Grace Hopper')]

def test_diff_of_identical_maps_is_empty():
    snapshot = AttendanceSnapshot(7, make_records())
    assert diff_attendance(snapshot.baseline, snapshot.baseline) == []
    assert snapshot.changes() == []

def test_single_difference_yields_one_entry():
    snapshot = AttendanceSnapshot(7, make_records())
    snapshot.set_attendance('alan@example.com', 0b0100)
    assert snapshot.changes() == [ChangeEntry(user_email='alan@example.com', session_id=7, new_attendance_type_bits=0b0100)]

def test_changes_follow_working_copy_order():
    snapshot = AttendanceSnapshot(7, make_records())
    snapshot.set_attendance('grace@example.com', 0b1000)
    snapshot.set_attendance('ada@example.com', 0b0100)
    assert [change.user_email for change in snapshot.changes()] == ['ada@example.com', 'grace@example.com']

def test_setting_back_to_baseline_is_not_a_change():
    snapshot = AttendanceSnapshot(7, make_records())
    snapshot.set_attendance('ada@example.com', 0b0100)
    snapshot.set_attendance('ada@example.com', 0b0001)
    assert snapshot.changes() == []

def test_edits_never_reach_the_baseline():
    records = make_records()
    snapshot = AttendanceSnapshot(7, records)
    snapshot.set_attendance('ada@example.com', 0b1000)
    assert snapshot.baseline['ada@example.com'].attendance_type_bits == 0b0001
    assert records[0].attendance_type_bits == 0b0001
    assert snapshot.working['ada@example.com'].attendance_type_bits == 0b1000
    with pytest.raises(TypeError):
        snapshot.baseline['ada@example.com'] = records[1]  # type: ignore[index]

def test_revert_restores_baseline():
    snapshot = AttendanceSnapshot(7, make_records())
    snapshot.set_attendance('ada@example.com', 0b1000)
    snapshot.set_attendance('alan@example.com', 0b1000)
    snapshot.revert('ada@example.com')
    assert [change.user_email for change in snapshot.changes()] == ['alan@example.com']
    snapshot.revert()
    assert snapshot.changes() == []

def test_keys_only_in_working_map_are_changes_and_baseline_only_keys_are_ignored():
    baseline = {record.user_email : record for record in make_records()[:2]}
    working = {record.user_email : record for record in make_records()[1:]}
    assert diff_attendance(baseline, working) == [ChangeEntry(user_email='grace@example.com', session_id=7, new_attendance_type_bits=0b0010)]

def test_unknown_users_and_negative_bits_are_rejected():
    snapshot = AttendanceSnapshot(7, make_records())
    with pytest.raises(KeyError):
        snapshot.set_attendance('nobody@example.com', 0b0001)
    with pytest.raises(ValueError):
        snapshot.set_attendance('ada@example.com', -1)

def test_records_must_belong_to_the_session_and_be_unique():
    with pytest.raises(ValueError):
        AttendanceSnapshot(8, make_records(7))
    with pytest.raises(ValueError):
        AttendanceSnapshot(7, make_records() + make_records()[:1])
