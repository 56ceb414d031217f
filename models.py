import secrets
from dataclasses import dataclass, field
from datetime import datetime, timezone

DEFAULT_MIME_TYPE = "application/octet-stream"

def generate_file_id() -> str:
    return secrets.token_hex(16)

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

@dataclass(frozen=True, repr=False)
class FileRecord:
    id: str
    original_name: str
    mime_type: str
    size: int
    payload: bytes
    upload_timestamp: datetime = field(default_factory=utcnow)

    @property
    def filename(self) -> str:
        return self.id

    @classmethod
    def create(cls, payload: bytes, original_name: str = None, mime_type: str = None) -> "FileRecord":
        file_id = generate_file_id()
        return cls(
            id=file_id,
            original_name=original_name or file_id,
            mime_type=mime_type or DEFAULT_MIME_TYPE,
            size=len(payload),
            payload=payload,
        )

    def __repr__(self):
        return f"<FileRecord(id={self.id}, name='{self.original_name}', size={self.size})>"
