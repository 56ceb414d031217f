import platform
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import psutil
from fastapi import FastAPI, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, settings, get_settings
from errors import ServiceError, error_response
from logging_config import get_logger
from middleware import CORS_HEADERS, ContentSizeLimitMiddleware, CORSHeadersMiddleware
from routers import files as files_router
from store import FileStore, get_app_store, get_store

logger = get_logger(__name__)

STARTED_AT = time.monotonic()

@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_app_store(app)
    store.clear()
    logger.info("CDN service starting up with an empty file store...")
    logger.info(
        f"Upload limits: {settings.MAX_FILE_SIZE_BYTES} bytes per file, "
        f"{settings.MAX_REQUEST_SIZE_BYTES} bytes per request, "
        f"{settings.MAX_FILES_PER_REQUEST} file(s) per request"
    )
    yield
    logger.info(f"CDN service shutting down, discarding {store.count()} stored file(s)...")
    store.clear()

app = FastAPI(
    title="CDN Service",
    version="0.1.0",
    lifespan=lifespan
)
app.state.file_store = FileStore()

app.add_middleware(ContentSizeLimitMiddleware)
app.add_middleware(CORSHeadersMiddleware)

app.include_router(files_router.router, prefix=settings.API_PREFIX)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405):
        logger.warning(f"No endpoint for {request.method} {request.url.path}")
        return error_response(ServiceError.endpoint_not_found())
    if exc.status_code == 413:
        return error_response(ServiceError.file_too_large(settings.MAX_FILE_SIZE_BYTES))

    logger.warning(f"HTTP error {exc.status_code} for {request.method} {request.url.path}: {exc.detail}")
    code = "BAD_REQUEST" if exc.status_code < 500 else "INTERNAL_SERVER_ERROR"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": code, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request for {request.method} {request.url.path}: {exc.errors()}")
    return error_response(ServiceError.no_file())

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error for {request.method} {request.url.path}")
    return error_response(ServiceError.internal(), headers=CORS_HEADERS)

@app.get(f"{settings.API_PREFIX}/health", tags=["Health"])
async def health(
    store: FileStore = Depends(get_store),
    current_settings: Settings = Depends(get_settings)
):
    memory = psutil.Process().memory_info()
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "filesCount": store.count(),
        "environment": current_settings.ENVIRONMENT,
        "uptimeSeconds": round(time.monotonic() - STARTED_AT, 3),
        "memory": {
            "rssBytes": memory.rss,
            "vmsBytes": memory.vms,
        },
        "pythonVersion": platform.python_version(),
    }

@app.get(settings.API_PREFIX or "/", tags=["Root"])
async def read_root(current_settings: Settings = Depends(get_settings)):
    logger.info("Root endpoint was called")
    prefix = current_settings.API_PREFIX.rstrip("/")
    return {
        "message": "CDN Service is running!",
        "endpoints": {
            "upload": f"POST {prefix}/upload",
            "getFile": f"GET {prefix}/file/:id",
            "fileInfo": f"GET {prefix}/info/:id",
            "listFiles": f"GET {prefix}/files",
            "deleteFile": f"DELETE {prefix}/file/:id",
            "health": f"GET {prefix}/health",
        },
        "limits": {
            "maxFileSizeBytes": current_settings.MAX_FILE_SIZE_BYTES,
            "maxRequestSizeBytes": current_settings.MAX_REQUEST_SIZE_BYTES,
            "maxFilesPerRequest": current_settings.MAX_FILES_PER_REQUEST,
        },
    }

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting CDN service on {settings.CDN_HOST}:{settings.CDN_PORT}")
    uvicorn.run("main:app", host=settings.CDN_HOST, port=settings.CDN_PORT)
