'''Methods corresponding to authentication operations'''

from client.communication import outgoing, utils
from client.communication.requests import BackendRequests
from client.errors import MalformedResponse
from client.logging import make_log
from client.message_strings import general_messages

from models.activity_log import LogAuthor, LogType
from models.constants import REQUEST_CONSTANTS
from models.records import Principal
from models.response_models import LoginData, ResponseEnvelope

__all__ = ('login', 'logout')

async def login(requests: BackendRequests, email: str, password: str) -> Principal:
    '''Exchange credentials for a bearer token and hand both it and the principal to the session manager'''
    endpoint: str = REQUEST_CONSTANTS.endpoints.login
    envelope: ResponseEnvelope = await requests.request('POST', endpoint,
                                                        body={'username' : email, 'password' : password},
                                                        authenticated=False,
                                                        content_type=outgoing.FORM_CONTENT)
    access_token = (envelope.model_extra or {}).get('access_token')
    # A token alongside data is a successful login even without a status
    if not (envelope.data and access_token):
        utils.expect_success(envelope, requests.client_config.unknown_request_message)

    login_data: LoginData = utils.parse_data(envelope, LoginData, endpoint)
    if not isinstance(access_token, str) or not access_token:
        raise MalformedResponse(general_messages.malformed_response_body(endpoint, 'Missing access token'))

    principal: Principal = login_data.to_principal()
    requests.session_manager.local_authenticate(access_token, principal,
                                                display_name=f'{login_data.user_forename} {login_data.user_surname}'.strip(),
                                                expires=login_data.expires)
    if requests.logger:
        await requests.logger.enqueue_log(make_log(LogAuthor.REQUEST_LAYER, LogType.USER,
                                                   general_messages.login_succeeded(login_data.user_email),
                                                   user_concerned=login_data.user_email))
    return principal

def logout(requests: BackendRequests) -> None:
    requests.session_manager.clear_auth_data()
