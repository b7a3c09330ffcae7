import pytest

from client.communication.requests import BackendRequests
from client.config.constants import ClientConfig
from client.session_manager import SessionManager

from models.catalog import CapabilityCatalog
from models.records import Principal

from tests.fakes import FakeTransport, ok

PERMISSIONS: dict[str, int] = {
    'Administer' : 0b00000001,
    'Add User' : 0b00000010,
    'Update Other Users' : 0b00000100,
    'Delete Users' : 0b00001000,
    'Add Training Session' : 0b00010000,
    'Update Training Sessions' : 0b00100000,
    'Delete Training Sessions' : 0b01000000,
    'Update Self' : 0b10000000,
}

ATTENDANCE_TYPES: dict[str, int] = {
    'Signed Up' : 0b0001,
    'No Longer Attending' : 0b0010,
    'Attended' : 0b0100,
    'No Show' : 0b1000,
}

@pytest.fixture
def permission_catalog() -> CapabilityCatalog:
    return CapabilityCatalog.from_mapping(PERMISSIONS)

@pytest.fixture
def attendance_catalog() -> CapabilityCatalog:
    return CapabilityCatalog.from_mapping(ATTENDANCE_TYPES)

@pytest.fixture
def client_config(tmp_path) -> ClientConfig:
    return ClientConfig(backend_url='http://backend.test',
                        read_timeout=0.5,
                        catalog_timeout=1.0,
                        log_filepath=tmp_path / 'activity.jsonl',
                        log_batch_size=4,
                        log_interval=0.01,
                        log_waiting_period=0.01,
                        log_queue_size=0,
                        log_max_retries=2,
                        unknown_update_message='Unable to update the attendance of a user',
                        unknown_session_update_message='Unable to update training session',
                        unknown_request_message='Unable to reach the backend')

@pytest.fixture
def session_manager() -> SessionManager:
    manager = SessionManager()
    manager.local_authenticate('token-1', Principal(id=1, email='coach@example.com', granted_bits=PERMISSIONS['Update Training Sessions']),
                               display_name='Club Coach')
    return manager

@pytest.fixture
def make_requests(client_config, session_manager):
    def factory(responder=lambda call: ok(), delay: float = 0, logger=None) -> tuple[BackendRequests, FakeTransport]:
        transport = FakeTransport(responder, delay)
        return BackendRequests(transport, client_config, session_manager, logger), transport
    return factory
