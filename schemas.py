from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core.core_schema import ValidationInfo

from config import settings

def _first_header_value(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    return value.split(",")[0].strip() or None

def build_file_url(request, file_id: str) -> str:
    # Forwarded headers are untrusted and only shape the returned link.
    proto = _first_header_value(request.headers.get("x-forwarded-proto")) or request.url.scheme
    host = (
        _first_header_value(request.headers.get("x-forwarded-host"))
        or request.headers.get("host")
        or request.url.netloc
    )
    prefix = settings.API_PREFIX.rstrip("/")
    return f"{proto}://{host}{prefix}/file/{file_id}"

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class FileRecordPublic(CamelModel):
    id: str
    original_name: str
    filename: str
    mime_type: str
    size: int
    upload_timestamp: datetime
    url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode='after')
    def populate_url(self, info: ValidationInfo):
        request = info.context.get("request") if info.context else None
        if request is not None:
            self.url = build_file_url(request, self.id)
        return self

    @classmethod
    def from_record(cls, record, request=None) -> "FileRecordPublic":
        return cls.model_validate(record, from_attributes=True, context={"request": request})

class FileUploadResponse(CamelModel):
    success: bool = True
    message: str = "File uploaded successfully"
    data: FileRecordPublic

class FileInfoResponse(CamelModel):
    success: bool = True
    data: FileRecordPublic

class FileListResponse(CamelModel):
    success: bool = True
    count: int
    data: List[FileRecordPublic]

class FileDeleteResponse(CamelModel):
    success: bool = True
    message: str = "File deleted successfully"
    id: str

class ErrorResponse(BaseModel):
    error: str
    message: str
