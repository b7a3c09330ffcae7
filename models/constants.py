from pathlib import Path
from typing import Annotated, Any

import pytomlpp
from pydantic import BaseModel, Field

__all__ = ('EndpointConstants', 'RequestConstants', 'AttendanceTypeNames', 'CatalogConstants',
           'REQUEST_CONSTANTS', 'CATALOG_CONSTANTS', 'load_constants')

class EndpointConstants(BaseModel):
    login: Annotated[str, Field(frozen=True)]
    permissions_enum: Annotated[str, Field(frozen=True)]
    attendance_types_enum: Annotated[str, Field(frozen=True)]
    users: Annotated[str, Field(frozen=True)]
    user: Annotated[str, Field(frozen=True)]
    training_sessions: Annotated[str, Field(frozen=True)]
    training_session: Annotated[str, Field(frozen=True)]
    session_attendance: Annotated[str, Field(frozen=True)]
    user_attendance: Annotated[str, Field(frozen=True)]
    attendance_update: Annotated[str, Field(frozen=True)]

class RequestConstants(BaseModel):
    success_status: Annotated[int, Field(frozen=True, ge=100, le=599)]
    email_regex: Annotated[str, Field(frozen=True)]
    max_items: Annotated[int, Field(frozen=True, ge=1)]
    endpoints: EndpointConstants

class AttendanceTypeNames(BaseModel):
    '''Names under which the attendance-type catalog publishes each state'''
    signed_up: Annotated[str, Field(frozen=True, min_length=1)]
    no_longer_attending: Annotated[str, Field(frozen=True, min_length=1)]
    attended: Annotated[str, Field(frozen=True, min_length=1)]
    no_show: Annotated[str, Field(frozen=True, min_length=1)]

class CatalogConstants(BaseModel):
    administer: Annotated[str, Field(frozen=True, min_length=1)]
    attendance: AttendanceTypeNames

def load_constants(filepath: Path = Path(__file__).parent.joinpath('constants.toml')) -> tuple[RequestConstants, CatalogConstants]:
    loaded_constants: dict[str, Any] = pytomlpp.load(filepath)
    request_constants = RequestConstants.model_validate(loaded_constants['components']['request'])
    catalog_constants = CatalogConstants.model_validate(loaded_constants['components']['catalog'])

    return request_constants, catalog_constants

REQUEST_CONSTANTS, CATALOG_CONSTANTS = load_constants()
