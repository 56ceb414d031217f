from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from fastapi.responses import JSONResponse

class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    TOO_LARGE = "TOO_LARGE"
    MISSING_INPUT = "MISSING_INPUT"
    INVALID_INPUT = "INVALID_INPUT"
    INTERNAL = "INTERNAL"

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TOO_LARGE: 400,
    ErrorKind.MISSING_INPUT: 400,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.INTERNAL: 500,
}

@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    code: str
    message: str

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    @classmethod
    def no_file(cls) -> "ServiceError":
        return cls(ErrorKind.MISSING_INPUT, "NO_FILE", "No file uploaded")

    @classmethod
    def file_too_large(cls, max_bytes: Optional[int] = None) -> "ServiceError":
        message = "File too large"
        if max_bytes is not None:
            message = f"File too large. Maximum size is {max_bytes} bytes"
        return cls(ErrorKind.TOO_LARGE, "FILE_TOO_LARGE", message)

    @classmethod
    def too_many_files(cls, max_files: int) -> "ServiceError":
        return cls(ErrorKind.INVALID_INPUT, "TOO_MANY_FILES", f"Too many files. Maximum is {max_files} per request")

    @classmethod
    def file_not_found(cls) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, "FILE_NOT_FOUND", "File not found")

    @classmethod
    def endpoint_not_found(cls) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, "ENDPOINT_NOT_FOUND", "Endpoint not found")

    @classmethod
    def internal(cls, code: str = "INTERNAL_SERVER_ERROR", message: str = "Internal server error") -> "ServiceError":
        return cls(ErrorKind.INTERNAL, code, message)

def error_response(error: ServiceError, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.code, "message": error.message},
        headers=headers,
    )
