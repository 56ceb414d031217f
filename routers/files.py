from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, UploadFile, File, Depends, Request
from fastapi.responses import Response
from starlette.datastructures import UploadFile as StarletteUploadFile

import crud, schemas
from config import Settings, get_settings
from errors import ServiceError, error_response
from logging_config import get_logger
from store import FileStore, get_store

logger = get_logger(__name__)

router = APIRouter(
    tags=["files"],
)

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse},
    404: {"model": schemas.ErrorResponse},
    500: {"model": schemas.ErrorResponse},
}

def content_disposition(filename: str, disposition_type: str = "inline") -> str:
    cleaned = "".join(ch for ch in filename if ch not in '"\\' and ch.isprintable())
    if cleaned.isascii():
        return f'{disposition_type}; filename="{cleaned}"'
    return f"{disposition_type}; filename*=utf-8''{quote(cleaned)}"

@router.post("/upload", response_model=schemas.FileUploadResponse, responses=ERROR_RESPONSES)
async def upload_file(
    request: Request,
    file: Optional[UploadFile] = File(None),
    store: FileStore = Depends(get_store),
    current_settings: Settings = Depends(get_settings)
):
    if file is not None:
        logger.info(f"Upload request for filename: '{file.filename}', content_type: '{file.content_type}'")
    else:
        logger.info("Upload request without a 'file' field")

    form = await request.form()
    file_count = sum(1 for _, value in form.multi_items() if isinstance(value, StarletteUploadFile))

    result = await crud.create_file_record(store, file, current_settings, file_count=file_count)
    if isinstance(result, ServiceError):
        return error_response(result)

    return schemas.FileUploadResponse(data=schemas.FileRecordPublic.from_record(result, request))

@router.get("/file/{file_id}", responses=ERROR_RESPONSES)
async def download_file(
    file_id: str,
    store: FileStore = Depends(get_store),
    current_settings: Settings = Depends(get_settings)
):
    logger.info(f"Download request for file_id: {file_id}")
    result = crud.get_file_record(store, file_id, failure_code="FILE_RETRIEVAL_FAILED")
    if isinstance(result, ServiceError):
        return error_response(result)

    return Response(
        content=result.payload,
        headers={
            "Content-Type": result.mime_type,
            "Content-Disposition": content_disposition(result.original_name),
            "Cache-Control": f"public, max-age={current_settings.CACHE_MAX_AGE_SECONDS}",
        },
    )

@router.get("/info/{file_id}", response_model=schemas.FileInfoResponse, responses=ERROR_RESPONSES)
async def get_file_info(
    file_id: str,
    request: Request,
    store: FileStore = Depends(get_store)
):
    logger.info(f"Info request for file_id: {file_id}")
    result = crud.get_file_record(store, file_id, failure_code="INFO_RETRIEVAL_FAILED")
    if isinstance(result, ServiceError):
        return error_response(result)
    return schemas.FileInfoResponse(data=schemas.FileRecordPublic.from_record(result, request))

@router.get("/files", response_model=schemas.FileListResponse, responses=ERROR_RESPONSES)
async def list_files(
    request: Request,
    store: FileStore = Depends(get_store)
):
    result = crud.list_file_records(store)
    if isinstance(result, ServiceError):
        return error_response(result)

    logger.debug(f"Listing {len(result)} stored files")
    return schemas.FileListResponse(
        count=len(result),
        data=[schemas.FileRecordPublic.from_record(record, request) for record in result],
    )

@router.delete("/file/{file_id}", response_model=schemas.FileDeleteResponse, responses=ERROR_RESPONSES)
async def delete_file(
    file_id: str,
    store: FileStore = Depends(get_store)
):
    logger.info(f"Delete request for file_id: {file_id}")
    error = crud.delete_file_record(store, file_id)
    if error is not None:
        return error_response(error)
    return schemas.FileDeleteResponse(id=file_id)
