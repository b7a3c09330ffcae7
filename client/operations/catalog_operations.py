'''Methods corresponding to enumeration queries'''

import asyncio

from client.communication import utils
from client.communication.requests import BackendRequests
from client.logging import make_log
from client.message_strings import general_messages

from models.activity_log import LogAuthor, LogType
from models.catalog import CapabilityCatalog
from models.constants import REQUEST_CONSTANTS
from models.response_models import ResponseEnvelope

__all__ = ('fetch_catalog', 'fetch_permission_catalog', 'fetch_attendance_catalog', 'fetch_catalogs')

async def fetch_catalog(requests: BackendRequests, endpoint: str) -> CapabilityCatalog:
    envelope: ResponseEnvelope = await requests.request('GET', endpoint,
                                                        authenticated=False,
                                                        timeout=requests.client_config.catalog_timeout)
    catalog: CapabilityCatalog = utils.parse_catalog(envelope, endpoint)
    if requests.logger:
        await requests.logger.enqueue_log(make_log(LogAuthor.BOOTUP_HANDLER, LogType.REQUEST,
                                                   general_messages.catalog_loaded(endpoint, len(catalog))))
    return catalog

async def fetch_permission_catalog(requests: BackendRequests) -> CapabilityCatalog:
    return await fetch_catalog(requests, REQUEST_CONSTANTS.endpoints.permissions_enum)

async def fetch_attendance_catalog(requests: BackendRequests) -> CapabilityCatalog:
    return await fetch_catalog(requests, REQUEST_CONSTANTS.endpoints.attendance_types_enum)

async def fetch_catalogs(requests: BackendRequests) -> tuple[CapabilityCatalog, CapabilityCatalog]:
    '''Fetch the permission and attendance-type catalogs concurrently'''
    permission_catalog, attendance_catalog = await asyncio.gather(fetch_permission_catalog(requests),
                                                                  fetch_attendance_catalog(requests))
    return permission_catalog, attendance_catalog
