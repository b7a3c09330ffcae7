'''Abstraction for locally managing the authenticated principal'''
import time
from datetime import datetime
from functools import wraps
from typing import Any, Optional

from client.errors import InvalidAuthenticationState

from models.records import Principal

__all__ = 'SessionManager',

class SessionManager:
    '''Holds the bearer token and principal of the logged in user for the lifetime of the process'''
    __slots__ = ('_token', '_principal', '_display_name', '_valid_until', '__weakref__')

    def __init__(self):
        self._token: Optional[str] = None
        self._principal: Optional[Principal] = None
        self._display_name: Optional[str] = None
        self._valid_until: Optional[float] = None

    @staticmethod
    def requires_authentication(function):
        @wraps(function)
        def decorated(*args, **kwargs) -> Any:
            if not args:
                raise ValueError(f'Missing self argument')

            instance: SessionManager = args[0]
            if not isinstance(instance, SessionManager):
                raise ValueError(f'First positional argument not an instance of {SessionManager.__name__}')

            if not instance.check_authentication_integrity():
                raise InvalidAuthenticationState()

            return function(*args, **kwargs)
        return decorated

    @property
    def token(self) -> Optional[str]:
        return self._token
    @property
    def principal(self) -> Optional[Principal]:
        return self._principal
    @property
    def display_name(self) -> Optional[str]:
        return self._display_name
    @property
    def valid_until(self) -> Optional[float]:
        return self._valid_until

    def local_authenticate(self, token: str, principal: Principal, display_name: Optional[str] = None, expires: Optional[datetime] = None) -> None:
        if not token:
            raise ValueError('Empty bearer token')
        self._token = token
        self._principal = principal
        self._display_name = display_name
        self._valid_until = expires.timestamp() if expires else None

    @requires_authentication
    def bearer_token(self) -> str:
        assert self._token  # through requires_authentication decorator
        return self._token

    @requires_authentication
    def current_principal(self) -> Principal:
        assert self._principal  # through requires_authentication decorator
        return self._principal

    def clear_auth_data(self) -> None:
        self._token = None
        self._principal = None
        self._display_name = None
        self._valid_until = None

    def check_authentication_integrity(self, ref_timestamp: Optional[float] = None) -> bool:
        if not (self._token and self._principal):
            return False
        return self._valid_until is None or self._valid_until > (ref_timestamp or time.time())
