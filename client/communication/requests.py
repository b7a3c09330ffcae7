'''Session-bound handle for issuing backend calls through an injected transport'''
from typing import Any, Final, Optional
from urllib.parse import quote

from client.communication import incoming, outgoing
from client.config.constants import ClientConfig
from client.errors import TransportFailure
from client.logging import Logger, make_log
from client.session_manager import SessionManager

from models.activity_log import LogAuthor, LogType, Severity
from models.response_models import ResponseEnvelope
from models.typing import Transport

__all__ = ('BackendRequests',)

class BackendRequests:
    '''Bundles the transport, configuration and authentication state every backend call needs'''
    __slots__ = ('_transport', '_client_config', '_session_manager', '_logger')

    def __init__(self, transport: Transport, client_config: ClientConfig,
                 session_manager: SessionManager, logger: Optional[Logger] = None):
        self._transport: Final[Transport] = transport
        self._client_config: Final[ClientConfig] = client_config
        self._session_manager: Final[SessionManager] = session_manager
        self._logger: Final[Optional[Logger]] = logger

    @property
    def client_config(self) -> ClientConfig:
        return self._client_config
    @property
    def session_manager(self) -> SessionManager:
        return self._session_manager
    @property
    def logger(self) -> Optional[Logger]:
        return self._logger

    def make_url(self, endpoint: str, **params: Any) -> str:
        '''Join an endpoint template onto the backend URL, quoting every substituted value'''
        quoted: dict[str, str] = {key : quote(str(value), safe='') for key, value in params.items()}
        return self._client_config.backend_url + endpoint.format(**quoted)

    async def request(self, method: str, endpoint: str, *,
                      body: Any = None,
                      authenticated: bool = True,
                      content_type: str = outgoing.JSON_CONTENT,
                      timeout: Optional[float] = None,
                      **params: Any) -> ResponseEnvelope:
        '''Issue one call and return its envelope, whatever its status.

        Raises `InvalidAuthenticationState` before dispatch if the call needs a
        bearer token and none is held, `TransportFailure` if no response arrived
        in time and `MalformedResponse` if the body is not an envelope.
        '''
        token: Optional[str] = self._session_manager.bearer_token() if authenticated else None
        url: str = self.make_url(endpoint, **params)
        try:
            raw_body: bytes = await outgoing.send_request(self._transport, method, url,
                                                          timeout=timeout or self._client_config.read_timeout,
                                                          token=token,
                                                          body=outgoing.encode_body(body, content_type),
                                                          content_type=content_type)
            return incoming.process_response(raw_body, url)
        except TransportFailure as e:
            if self._logger:
                principal = self._session_manager.principal
                await self._logger.enqueue_log(make_log(LogAuthor.REQUEST_LAYER, LogType.NETWORK, e.description,
                                                        severity=Severity.ERROR,
                                                        user_concerned=principal.email if principal else None))
            raise
