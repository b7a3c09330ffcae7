from typing import Annotated, Union
from typing_extensions import Self
from pydantic import BaseModel, Field, field_validator, model_validator

from pathlib import Path

__all__ = ('ClientConfig',)

class ClientConfig(BaseModel):
    # Network
    backend_url: Annotated[str, Field(min_length=1)]
    read_timeout: Annotated[float, Field(frozen=True, gt=0)]
    catalog_timeout: Annotated[float, Field(frozen=True, gt=0)]

    # Logging
    log_filepath: Path
    log_batch_size: Annotated[int, Field(ge=1)]
    log_interval: Annotated[float, Field(gt=0)]
    log_waiting_period: Annotated[float, Field(gt=0)]
    log_queue_size: Annotated[int, Field(ge=0)]
    log_max_retries: Annotated[int, Field(ge=1, default=3)]

    # Messages
    unknown_update_message: Annotated[str, Field(min_length=1)]
    unknown_session_update_message: Annotated[str, Field(min_length=1)]
    unknown_request_message: Annotated[str, Field(min_length=1)]
    message_separator: Annotated[str, Field(default='; ')]

    @field_validator('log_filepath', mode='before')
    @classmethod
    def process_log_filepath(cls, path: Union[str, Path]) -> Path:
        return Path(path) if isinstance(path, str) else path

    @field_validator('backend_url', mode='before')
    @classmethod
    def prevalidate_backend_url(cls, backend_url: str) -> str:
        backend_url = backend_url.strip()
        return backend_url if backend_url.endswith('/') else backend_url + '/'

    @model_validator(mode='after')
    def validate_timings(self) -> Self:
        if self.catalog_timeout < self.read_timeout:
            raise ValueError(f'Catalog timeout {self.catalog_timeout} must not be shorter than read timeout {self.read_timeout}')
        return self

    def finalise_log_filepath(self, client_root: Path) -> None:
        if not client_root.is_absolute():
            raise ValueError(f'Directory path {str(client_root)} not absolute')
        if not self.log_filepath.is_absolute():
            self.log_filepath = client_root / self.log_filepath
