from functools import lru_cache
from typing import Optional, Protocol

from movie_store.core.config import settings
from movie_store.db.redis import get_redis
from movie_store.models.movie import Movie

from .json_storage import JsonFileMovieStorage
from .redis_storage import RedisMovieStorage


class MovieStorageProtocol(Protocol):
    async def insert(self, movie_id: str, movie: Movie) -> None:
        """Insert a record, overwriting any record stored under the same id.

        Args:
            movie_id: Key to store the record under
            movie: Record to store

        Raises:
            StorageError: the write failed
        """
        ...

    async def get(self, movie_id: str) -> Optional[Movie]:
        """Retrieve a single record by its id.

        Args:
            movie_id: Key of the record

        Returns:
            The stored record or None when nothing is stored under the key
        """
        ...

    async def values(self) -> list[Movie]:
        """Retrieve every stored record in ascending key order."""
        ...

    async def remove(self, movie_id: str) -> None:
        """Delete the record stored under the key, if any."""
        ...


@lru_cache()
def get_movie_storage() -> MovieStorageProtocol:
    if settings.storage_backend == "json":
        return JsonFileMovieStorage(settings.json_storage_path)

    return RedisMovieStorage(get_redis(), settings.redis_key)
