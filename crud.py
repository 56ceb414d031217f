from typing import List, Optional, Union

from fastapi import UploadFile

from config import Settings
from errors import ServiceError
from logging_config import get_logger
from models import FileRecord
from store import FileStore

logger = get_logger(__name__)

READ_CHUNK_SIZE = 1024 * 1024

RETRIEVAL_FAILURE_MESSAGES = {
    "FILE_RETRIEVAL_FAILED": "File retrieval failed",
    "INFO_RETRIEVAL_FAILED": "Info retrieval failed",
}

async def read_upload_payload(upload: UploadFile, max_bytes: int) -> Optional[bytes]:
    chunks = []
    received = 0
    while chunk := await upload.read(READ_CHUNK_SIZE):
        received += len(chunk)
        if received > max_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)

async def create_file_record(
    store: FileStore,
    upload: Optional[UploadFile],
    settings: Settings,
    file_count: int = 1
) -> Union[FileRecord, ServiceError]:
    if upload is None:
        return ServiceError.no_file()
    if file_count > settings.MAX_FILES_PER_REQUEST:
        return ServiceError.too_many_files(settings.MAX_FILES_PER_REQUEST)
    if upload.size is not None and upload.size > settings.MAX_FILE_SIZE_BYTES:
        logger.warning(f"Rejected '{upload.filename}': declared size {upload.size} exceeds {settings.MAX_FILE_SIZE_BYTES}")
        return ServiceError.file_too_large(settings.MAX_FILE_SIZE_BYTES)

    try:
        payload = await read_upload_payload(upload, settings.MAX_FILE_SIZE_BYTES)
        if payload is None:
            logger.warning(f"Rejected '{upload.filename}': payload exceeds {settings.MAX_FILE_SIZE_BYTES} bytes")
            return ServiceError.file_too_large(settings.MAX_FILE_SIZE_BYTES)

        record = FileRecord.create(payload, original_name=upload.filename, mime_type=upload.content_type)
        store.put(record)
    except Exception:
        logger.exception(f"Unexpected error while storing upload '{upload.filename}'")
        return ServiceError.internal("UPLOAD_FAILED", "Upload failed")
    finally:
        await upload.close()

    logger.info(f"Stored '{record.original_name}' as {record.id} ({record.size} bytes, {record.mime_type})")
    return record

def get_file_record(
    store: FileStore,
    file_id: str,
    failure_code: str = "FILE_RETRIEVAL_FAILED"
) -> Union[FileRecord, ServiceError]:
    try:
        record = store.get(file_id)
    except Exception:
        logger.exception(f"Unexpected error while looking up file {file_id}")
        return ServiceError.internal(failure_code, RETRIEVAL_FAILURE_MESSAGES.get(failure_code, "File retrieval failed"))
    if record is None:
        logger.warning(f"File not found: ID {file_id}")
        return ServiceError.file_not_found()
    return record

def list_file_records(store: FileStore) -> Union[List[FileRecord], ServiceError]:
    try:
        return store.list_all()
    except Exception:
        logger.exception("Unexpected error while listing files")
        return ServiceError.internal("LIST_FAILED", "Failed to get file list")

def delete_file_record(store: FileStore, file_id: str) -> Optional[ServiceError]:
    try:
        removed = store.delete(file_id)
    except Exception:
        logger.exception(f"Unexpected error while deleting file {file_id}")
        return ServiceError.internal("DELETE_FAILED", "File deletion failed")
    if not removed:
        logger.warning(f"File not found for deletion: ID {file_id}")
        return ServiceError.file_not_found()
    logger.info(f"Deleted file {file_id}")
    return None
