from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from typing import Callable
import json
import time
import uuid

from app.config.settings import settings
from app.utils.logging import get_logger
from app.common.constants import CACHE_HEADER
from app.common.enums import CacheStatus
from app.cache.keys import CacheKeys

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging HTTP requests and responses.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Log request details and processing time.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        logger.info(
            f"Request started | ID: {request_id} | "
            f"Method: {request.method} | Path: {request.url.path}"
        )

        try:
            response = await call_next(request)
            process_time = time.time() - start_time
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            logger.info(
                f"Request completed | ID: {request_id} | "
                f"Status: {response.status_code} | "
                f"Cache: {response.headers.get(CACHE_HEADER, '-')} | "
                f"Time: {process_time:.4f}s"
            )

            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed | ID: {request_id} | "
                f"Error: {str(e)} | Time: {process_time:.4f}s",
                exc_info=True
            )
            raise


class ResponseCacheMiddleware(BaseHTTPMiddleware):
    """
    Read-through cache for GET responses of the blog resources.

    Keys are `cache:<path>[?<query>]`, the same namespace CacheInvalidation
    purges after writes. Only successful JSON responses are stored.
    """

    def _is_cacheable(self, request: Request) -> bool:
        if request.method != "GET" or not settings.CACHE_ENABLED:
            return False
        path = request.url.path
        return any(path.startswith(prefix) for prefix in settings.CACHE_PATH_PREFIXES)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Serve cached payloads and populate the cache on miss.

        Flow:
        1. Skip non-GET requests and paths outside CACHE_PATH_PREFIXES
        2. Return the cached payload with X-Cache: HIT if present
        3. Otherwise call the handler, store a 200 JSON body, add X-Cache: MISS

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response
        """
        cache = getattr(request.app.state, "cache", None)
        if cache is None or not self._is_cacheable(request):
            return await call_next(request)

        cache_key = CacheKeys.request(request.url.path, request.url.query)

        cached_data = await cache.get(cache_key)
        if cached_data is not None:
            return JSONResponse(
                status_code=status.HTTP_200_OK,
                content=cached_data,
                headers={CACHE_HEADER: CacheStatus.HIT.value}
            )

        response = await call_next(request)

        content_type = response.headers.get("content-type", "")
        if response.status_code != status.HTTP_200_OK or not content_type.startswith("application/json"):
            return response

        # Cookies are per-client; a HIT would replay them to everyone
        if "set-cookie" in response.headers:
            return response

        body = b""
        async for chunk in response.body_iterator:
            body += chunk

        try:
            payload = json.loads(body)
        except ValueError:
            logger.warning(f"Response for {cache_key} is not valid JSON, not caching")
            payload = None

        if payload is not None:
            await cache.set(cache_key, payload, settings.CACHE_DEFAULT_TTL)

        cached_response = Response(content=body, status_code=response.status_code)
        cached_response.raw_headers = list(response.raw_headers)
        cached_response.headers[CACHE_HEADER] = CacheStatus.MISS.value
        return cached_response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Catch and format unhandled exceptions.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response
        """
        try:
            return await call_next(request)
        except Exception as e:
            request_id = getattr(request.state, "request_id", "unknown")
            logger.error(
                f"Unhandled exception | Request ID: {request_id} | "
                f"Path: {request.url.path} | Error: {str(e)}",
                exc_info=True
            )

            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": "Internal server error",
                    "request_id": request_id
                }
            )


def setup_cors(app) -> None:
    """
    Setup CORS middleware with configuration from settings.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
        expose_headers=["X-Request-ID", "X-Process-Time", CACHE_HEADER],
    )


def setup_middlewares(app) -> None:
    """
    Setup all application middlewares.
    Order matters: last added is executed first.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(ResponseCacheMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    setup_cors(app)
