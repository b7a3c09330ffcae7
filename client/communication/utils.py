'''Helper functions for interpreting backend envelopes'''
from typing import Any, Callable, Optional

from client.errors import BusinessRejection, InvalidCatalog, MalformedResponse, TransportFailure

from models.catalog import CapabilityCatalog
from models.response_models import EnumPayload, ResponseEnvelope
from models.schemas import ENUM_PAYLOAD_VALIDATOR

from jsonschema import ValidationError as SchemaValidationError
from pydantic import TypeAdapter, ValidationError

__all__ = ('expect_success', 'parse_data', 'parse_catalog')


def expect_success(envelope: ResponseEnvelope, unknown_message: str) -> ResponseEnvelope:
    '''Return `envelope` if the call was applied, otherwise raise the matching remote error'''
    if envelope.succeeded:
        return envelope
    if (message := envelope.rejection_message):
        raise BusinessRejection(message)
    raise TransportFailure(unknown_message)

def parse_data(envelope: ResponseEnvelope, data_type: Any, url: str, convert: Optional[Callable[[Any], Any]] = None) -> Any:
    '''Validate the `data` member of a successful envelope as `data_type`, passing the result through `convert` if given'''
    try:
        data: Any = TypeAdapter(data_type).validate_python(envelope.data)
        return convert(data) if convert else data
    except ValidationError as e:
        raise MalformedResponse(f'Unexpected data from {url}: {e}') from e

def parse_catalog(envelope: ResponseEnvelope, url: str, unknown_message: Optional[str] = None) -> CapabilityCatalog:
    '''Build a catalog out of an enumeration envelope, rejecting anything that is not a set of single-bit entries'''
    expect_success(envelope, unknown_message or InvalidCatalog.description)
    try:
        ENUM_PAYLOAD_VALIDATOR.validate(envelope.data)
    except SchemaValidationError as e:
        raise InvalidCatalog(f'Enumeration from {url} does not match schema: {e.message}') from e

    try:
        payload: EnumPayload = EnumPayload.model_validate(envelope.data)
        return CapabilityCatalog(payload.enum_items)
    except (ValidationError, ValueError) as e:
        raise InvalidCatalog(f'Enumeration from {url} rejected: {e}') from e
