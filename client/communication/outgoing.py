'''Module containing logic for handling outgoing data'''

import asyncio
from typing import Final, Optional
from urllib.parse import urlencode

from client.errors import TransportFailure
from client.message_strings import general_messages

from models.typing import Transport

import orjson

__all__ = ('JSON_CONTENT', 'FORM_CONTENT', 'encode_body', 'send_request')

JSON_CONTENT: Final[str] = 'application/json'
FORM_CONTENT: Final[str] = 'application/x-www-form-urlencoded'

def encode_body(body: object, content_type: str = JSON_CONTENT) -> Optional[bytes]:
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if content_type == FORM_CONTENT:
        return urlencode(body).encode('utf-8')
    return orjson.dumps(body)

async def send_request(transport: Transport, method: str, url: str,
                       timeout: float,
                       token: Optional[str] = None,
                       body: Optional[bytes] = None,
                       content_type: str = JSON_CONTENT) -> bytes:
    '''Dispatch a single call and wait at most `timeout` seconds for its raw response body'''
    try:
        return await asyncio.wait_for(transport(method, url, token=token, body=body, content_type=content_type), timeout)
    except (asyncio.TimeoutError, OSError) as e:
        raise TransportFailure(general_messages.unknown_request_failure(url, str(e) or e.__class__.__name__)) from e
