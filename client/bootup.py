'''Methods invoked during client bootup'''

import os
from pathlib import Path
from typing import Any, Final, NamedTuple, Optional

from client.authz.gate import PermissionGate
from client.communication.requests import BackendRequests
from client.config.constants import ClientConfig
from client.logging import Logger, make_log
from client.operations import catalog_operations
from client.session_manager import SessionManager

from models.activity_log import LogAuthor, LogType, Severity
from models.catalog import CapabilityCatalog
from models.typing import Transport

from dotenv import load_dotenv
import pytomlpp

__all__ = ('ClientContext',
           'init_client_configurations',
           'init_logger',
           'init_session_manager',
           'init_backend_requests',
           'load_catalogs',
           'init_permission_gate')

CLIENT_ROOT: Final[Path] = Path(__file__).parent

class ClientContext(NamedTuple):
    '''Everything a session needs once bootup has completed'''
    requests: BackendRequests
    permission_catalog: CapabilityCatalog
    attendance_catalog: CapabilityCatalog

def init_client_configurations(config_filepath: Optional[Path] = None, dotenv_path: Optional[Path] = None) -> ClientConfig:
    '''Load the client configuration, letting a `BACKEND_URL` environment variable (or `.env` entry) override the backend URL'''
    constants_mapping: dict[str, Any] = pytomlpp.load(config_filepath or CLIENT_ROOT.joinpath('config', 'constants.toml'))
    load_dotenv(dotenv_path=dotenv_path or CLIENT_ROOT.joinpath('.env'), override=False)
    if (backend_url := os.environ.get('BACKEND_URL')):
        constants_mapping['backend_url'] = backend_url

    client_config = ClientConfig.model_validate(constants_mapping)
    client_config.finalise_log_filepath(CLIENT_ROOT)

    return client_config

def init_logger(client_config: ClientConfig) -> Logger:
    '''Create the activity logger, must be called from within a running event loop'''
    client_config.log_filepath.parent.mkdir(parents=True, exist_ok=True)
    logger = Logger(log_filepath=client_config.log_filepath,
                    waiting_period=client_config.log_waiting_period,
                    batch_size=client_config.log_batch_size,
                    flush_interval=client_config.log_interval,
                    queue_size=client_config.log_queue_size,
                    max_retries=client_config.log_max_retries)
    logger.start()
    return logger

def init_session_manager() -> SessionManager:
    return SessionManager()

def init_backend_requests(transport: Transport, client_config: ClientConfig,
                          session_manager: SessionManager, logger: Optional[Logger] = None) -> BackendRequests:
    return BackendRequests(transport, client_config, session_manager, logger)

async def load_catalogs(requests: BackendRequests) -> ClientContext:
    '''Fetch both runtime catalogs. Bootup fails if either cannot be loaded'''
    try:
        permission_catalog, attendance_catalog = await catalog_operations.fetch_catalogs(requests)
    except Exception as e:
        if requests.logger:
            await requests.logger.enqueue_log(make_log(LogAuthor.BOOTUP_HANDLER, LogType.INTERNAL,
                                                       f'Failed to load catalogs: {e}',
                                                       severity=Severity.CRITICAL_FAILURE))
        raise

    return ClientContext(requests, permission_catalog, attendance_catalog)

def init_permission_gate(context: ClientContext) -> PermissionGate:
    '''Bind the permission catalog to the logged in principal'''
    return PermissionGate(context.permission_catalog, context.requests.session_manager.current_principal())
