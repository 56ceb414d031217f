from typing import Optional

from fastapi import HTTPException
from starlette.datastructures import Headers, MutableHeaders
from starlette.responses import Response

from config import settings
from errors import ServiceError, error_response
from logging_config import get_logger

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

class RequestBodyTooLarge(HTTPException):
    def __init__(self, detail: str = "Request body too large"):
        super().__init__(status_code=413, detail=detail)

class ContentSizeLimitMiddleware:
    def __init__(self, app, max_content_size: Optional[int] = None):
        self.app = app
        self.max_content_size = max_content_size

    def get_limit(self) -> int:
        if self.max_content_size is not None:
            return self.max_content_size
        return settings.MAX_REQUEST_SIZE_BYTES

    @staticmethod
    def receive_wrapper(receive, limit: int):
        received = 0

        async def inner():
            nonlocal received
            message = await receive()
            if message["type"] != "http.request":
                return message
            received += len(message.get("body", b""))
            if received > limit:
                logger.warning(f"Request body exceeded {limit} bytes while streaming")
                raise RequestBodyTooLarge(f"Request body exceeds {limit} bytes")
            return message

        return inner

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.get_limit()
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None and content_length.isdigit() and int(content_length) > limit:
            logger.warning(f"Rejected {scope['method']} {scope['path']}: Content-Length {content_length} exceeds {limit}")
            response = error_response(ServiceError.file_too_large(settings.MAX_FILE_SIZE_BYTES))
            await response(scope, receive, send)
            return

        await self.app(scope, self.receive_wrapper(receive, limit), send)

class CORSHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=204, headers=CORS_HEADERS)
            await response(scope, receive, send)
            return

        async def send_with_cors_headers(message):
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in CORS_HEADERS.items():
                    headers[name] = value
            await send(message)

        await self.app(scope, receive, send_with_cors_headers)
