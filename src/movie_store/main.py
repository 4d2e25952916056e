import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from redis.asyncio import Redis

from movie_store.api.v1 import movies
from movie_store.core.config import settings
from movie_store.core.errors import (
    MovieStoreError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from movie_store.db.redis import close_redis, init_redis, ping_redis

logger = logging.getLogger(__name__)

ERROR_STATUSES = {
    ValidationError: HTTPStatus.UNPROCESSABLE_ENTITY,
    NotFoundError: HTTPStatus.NOT_FOUND,
    StorageError: HTTPStatus.SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.storage_backend == "redis":
        redis_client = Redis(host=settings.redis_host, port=settings.redis_port)
        await ping_redis(redis_client, settings.redis_connect_max_time)
        init_redis(redis_client)
    logger.info("Movie storage backend: %s", settings.storage_backend)

    yield

    await close_redis()


app = FastAPI(
    title=settings.project_name,
    docs_url="/api/openapi",
    openapi_url="/api/openapi.json",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)


@app.exception_handler(MovieStoreError)
async def movie_store_error_handler(
    request: Request, exc: MovieStoreError
) -> ORJSONResponse:
    status = ERROR_STATUSES.get(type(exc), HTTPStatus.INTERNAL_SERVER_ERROR)
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return ORJSONResponse(
        status_code=status, content={"error": exc.kind, "detail": str(exc)}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
        content={
            "error": ValidationError.kind,
            "detail": jsonable_encoder(exc.errors()),
        },
    )


app.include_router(movies.router, prefix="/api/v1/movies", tags=["movies"])
