'''Module containing logic for interpreting incoming data'''

from client.errors import MalformedResponse
from client.message_strings import general_messages

from models.response_models import ResponseEnvelope

from pydantic import ValidationError

__all__ = ('process_response',)

def process_response(raw_body: bytes, url: str) -> ResponseEnvelope:
    try:
        return ResponseEnvelope.model_validate_json(raw_body or b'{}')
    except ValidationError as e:
        raise MalformedResponse(general_messages.malformed_response_body(url, str(e))) from e
