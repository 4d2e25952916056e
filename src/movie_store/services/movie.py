import asyncio
import logging
from functools import lru_cache
from typing import Annotated, Any, Mapping, Optional, Union
from uuid import uuid4

from fastapi import Depends

from movie_store.core.context import CallContext
from movie_store.core.errors import NotFoundError, StorageError, ValidationError
from movie_store.models.movie import Movie, MoviePayload, validate_payload

from .storage import MovieStorageProtocol, get_movie_storage

logger = logging.getLogger(__name__)

PayloadInput = Union[MoviePayload, Mapping[str, Any]]


class MovieService:
    """Create, read, update and delete movie records in a single store.

    Every public method runs under one lock, so concurrent requests never
    interleave their reads and writes on the store.
    """

    def __init__(self, storage: MovieStorageProtocol):
        self.storage = storage
        self._lock = asyncio.Lock()

    async def create_movie(self, payload: PayloadInput, context: CallContext) -> Movie:
        payload = validate_payload(payload)
        async with self._lock:
            movie = Movie(
                **payload.model_dump(),
                id=str(uuid4()),
                owner=context.caller,
                created_at=context.now(),
                updated_at=None,
            )
            await self._insert(movie)

        logger.info("Created movie %s owned by %s", movie.id, movie.owner)
        return movie

    async def get_movie_by_id(self, movie_id: str) -> Movie:
        if not movie_id:
            raise ValidationError("Movie id must not be empty.")

        async with self._lock:
            movie = await self._get(movie_id)

        if movie is None:
            raise NotFoundError(f"Movie with id={movie_id} not found.")
        return movie

    async def get_movie_by_title(self, title: str) -> Movie:
        async with self._lock:
            movies = await self._values()

        # titles are not unique, the first one in store order wins
        movie = next((m for m in movies if m.title == title), None)
        if movie is None:
            raise NotFoundError(f'Movie with title "{title}" not found.')
        return movie

    async def get_movies_by_artist(self, artist: str) -> list[Movie]:
        if not artist:
            raise ValidationError("Artist must not be empty.")

        async with self._lock:
            movies = await self._values()

        found = [m for m in movies if artist in m.main_artists]
        if not found:
            raise NotFoundError(f'No movies found for artist "{artist}".')
        logger.debug("Found %s movies for artist %r", len(found), artist)
        return found

    async def get_all_movies(self) -> list[Movie]:
        async with self._lock:
            return await self._values()

    async def update_movie(
        self, movie_id: str, payload: PayloadInput, context: CallContext
    ) -> Movie:
        payload = validate_payload(payload)
        async with self._lock:
            existing = await self._get(movie_id)
            if existing is None:
                raise NotFoundError(f"Movie with id={movie_id} not found.")

            updated_at = max(
                context.now(), existing.created_at, existing.updated_at or 0
            )
            movie = existing.model_copy(
                update={**payload.model_dump(), "updated_at": updated_at}
            )
            await self._insert(movie)

        logger.info("Updated movie %s", movie_id)
        return movie

    async def delete_movie(self, movie_id: str) -> Movie:
        async with self._lock:
            existing = await self._get(movie_id)
            if existing is None:
                raise NotFoundError(f"Movie with id={movie_id} not found.")

            try:
                await self.storage.remove(movie_id)
            except StorageError as e:
                logger.error("Failed to delete movie %s: %s", movie_id, e)
                raise

        logger.info("Deleted movie %s", movie_id)
        return existing

    async def _insert(self, movie: Movie) -> None:
        try:
            await self.storage.insert(movie.id, movie)
        except StorageError as e:
            logger.error("Failed to store movie %s: %s", movie.id, e)
            raise

    async def _get(self, movie_id: str) -> Optional[Movie]:
        try:
            movie = await self.storage.get(movie_id)
        except StorageError as e:
            logger.error("Failed to read movie %s: %s", movie_id, e)
            raise
        logger.debug("Looked up movie %s: %s", movie_id, movie is not None)
        return movie

    async def _values(self) -> list[Movie]:
        try:
            return await self.storage.values()
        except StorageError as e:
            logger.error("Failed to read movies: %s", e)
            raise


@lru_cache()
def get_movie_service(
    storage: Annotated[MovieStorageProtocol, Depends(get_movie_storage)],
) -> MovieService:
    return MovieService(storage)
