from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from app.config.settings import settings
from app.core.redis import redis_manager
from app.core.middleware import setup_middlewares
from app.cache.service import CacheService
from app.cache.invalidation import CacheInvalidation
from app.utils.logging import setup_logging, get_logger
from app.common.enums import Environment


setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info("Starting application...")

    await redis_manager.connect()

    app.state.cache = CacheService(redis_manager.redis)
    app.state.cache_invalidation = CacheInvalidation(app.state.cache)

    if redis_manager.is_connected:
        logger.info("Response cache enabled")

    logger.info("Application started successfully")

    yield

    logger.info("Shutting down application...")

    try:
        await app.state.cache_invalidation.drain()
        await redis_manager.disconnect()
        logger.info("Application shutdown complete")

    except Exception as e:
        logger.error(f"Error during shutdown: {e}")


DEBUG = settings.ENV == Environment.DEVELOPMENT.value or settings.DEBUG

if settings.ENV in [Environment.PRODUCTION.value, Environment.STAGING.value]:
    docs_url = None
    redoc_url = None
    openapi_url = None
else:
    docs_url = "/docs"
    redoc_url = "/redoc"
    openapi_url = "/openapi.json"

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Blog API",
    lifespan=lifespan,
    debug=DEBUG,
    docs_url=docs_url,
    redoc_url=redoc_url,
    openapi_url=openapi_url
)

setup_middlewares(app)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint for monitoring and load balancers.
    The API stays healthy without Redis; the cache is only reported as disabled.
    """
    redis_status = "disabled"

    if redis_manager.is_connected:
        try:
            await redis_manager.get_redis().ping()
            redis_status = "connected"
        except Exception as e:
            logger.error(f"Health check redis ping failed: {e}")
            redis_status = "unreachable"

    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "redis": redis_status
        }
    )


@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn_config = {
        "app": "main:app",
        "host": "0.0.0.0",
        "port": 8000,
    }

    if settings.ENV == Environment.DEVELOPMENT.value:
        uvicorn_config.update({
            "reload": True,
            "log_level": "debug",
        })
        logger.info("Starting in DEVELOPMENT mode (reload=True, debug=True)")
    else:
        uvicorn_config.update({
            "reload": False,
            "log_level": "info",
        })
        logger.info(f"Starting in {settings.ENV.upper()} mode (reload=False)")

    uvicorn.run(**uvicorn_config)
