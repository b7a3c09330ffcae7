'''JSON schemas for validating served payloads before they are parsed into models'''
from typing import Any, Final

from models.constants import REQUEST_CONSTANTS

from jsonschema import Draft202012Validator

__all__ = ('ENUM_PAYLOAD_SCHEMA', 'ENUM_PAYLOAD_VALIDATOR')

ENUM_PAYLOAD_SCHEMA: Final[dict[str, Any]] = {
    '$schema' : 'https://json-schema.org/draft/2020-12/schema',
    'type' : 'object',
    'required' : ['enum_items'],
    'properties' : {
        'enum_items' : {
            'type' : 'array',
            'maxItems' : REQUEST_CONSTANTS.max_items,
            'items' : {
                'type' : 'object',
                'required' : ['name', 'value'],
                'properties' : {
                    'name' : {'type' : 'string', 'minLength' : 1},
                    'value' : {'type' : 'integer', 'minimum' : 0},
                },
            },
        },
    },
}

Draft202012Validator.check_schema(ENUM_PAYLOAD_SCHEMA)
ENUM_PAYLOAD_VALIDATOR: Final[Draft202012Validator] = Draft202012Validator(ENUM_PAYLOAD_SCHEMA)
