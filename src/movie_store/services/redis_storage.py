from typing import Optional

from redis.asyncio import Redis
from pydantic import ValidationError as PydanticValidationError
from redis.exceptions import RedisError

from movie_store.core.errors import StorageError
from movie_store.models.movie import Movie


class RedisMovieStorage:
    """Movie records kept in one Redis hash, field = id, value = JSON."""

    def __init__(self, conn: Redis, key: str = "movies"):
        self.conn = conn
        self.key = key

    async def insert(self, movie_id: str, movie: Movie) -> None:
        try:
            await self.conn.hset(self.key, movie_id, movie.model_dump_json())
        except RedisError as e:
            raise StorageError(f"Failed to write movie {movie_id}", e) from e

    async def get(self, movie_id: str) -> Optional[Movie]:
        try:
            raw = await self.conn.hget(self.key, movie_id)
        except RedisError as e:
            raise StorageError(f"Failed to read movie {movie_id}", e) from e

        if raw is None:
            return None
        return _decode(raw, f"Failed to read movie {movie_id}")

    async def values(self) -> list[Movie]:
        try:
            raw = await self.conn.hgetall(self.key)
        except RedisError as e:
            raise StorageError("Failed to read movies", e) from e

        # hash fields come back in no particular order
        return [
            _decode(raw[field], "Failed to read movies")
            for field in sorted(raw, key=_as_str)
        ]

    async def remove(self, movie_id: str) -> None:
        try:
            await self.conn.hdel(self.key, movie_id)
        except RedisError as e:
            raise StorageError(f"Failed to delete movie {movie_id}", e) from e


def _decode(raw, action: str) -> Movie:
    try:
        return Movie.model_validate_json(raw)
    except PydanticValidationError as e:
        raise StorageError(action, e) from e


def _as_str(value) -> str:
    return value.decode() if isinstance(value, bytes) else value
