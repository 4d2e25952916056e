import json
import os
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError

from movie_store.core.errors import StorageError
from movie_store.models.movie import Movie


class JsonFileMovieStorage:
    """Movie storage backed by a local file.

    Storage format: one JSON object mapping id -> record, keys sorted.
    File access runs in the threadpool, off the event loop.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        try:
            with open(self.file_path, "r"):
                pass
        except FileNotFoundError:
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.file_path, "w") as f:
                json.dump({}, f)

    async def insert(self, movie_id: str, movie: Movie) -> None:
        await run_in_threadpool(self._insert, movie_id, movie)

    async def get(self, movie_id: str) -> Optional[Movie]:
        return await run_in_threadpool(self._get, movie_id)

    async def values(self) -> list[Movie]:
        return await run_in_threadpool(self._values)

    async def remove(self, movie_id: str) -> None:
        await run_in_threadpool(self._remove, movie_id)

    def _insert(self, movie_id: str, movie: Movie) -> None:
        action = f"Failed to write movie {movie_id}"
        state = self._load(action)
        state[movie_id] = movie.model_dump(mode="json")
        self._dump(state, action)

    def _get(self, movie_id: str) -> Optional[Movie]:
        action = f"Failed to read movie {movie_id}"
        raw = self._load(action).get(movie_id)
        if raw is None:
            return None
        return _decode(raw, action)

    def _values(self) -> list[Movie]:
        action = "Failed to read movies"
        state = self._load(action)
        return [_decode(state[key], action) for key in sorted(state)]

    def _remove(self, movie_id: str) -> None:
        action = f"Failed to delete movie {movie_id}"
        state = self._load(action)
        if state.pop(movie_id, None) is not None:
            self._dump(state, action)

    def _load(self, action: str) -> dict[str, Any]:
        try:
            with open(self.file_path, "r") as f:
                state = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(action, e) from e

        if not isinstance(state, dict):
            raise StorageError(
                action, ValueError("storage file is not a JSON object")
            )
        return state

    def _dump(self, state: dict[str, Any], action: str) -> None:
        # atomic replace, a failed write keeps the previous file
        tmp_path = f"{self.file_path}.tmp"
        try:
            with open(tmp_path, "w") as f:
                json.dump(state, f, sort_keys=True)
            os.replace(tmp_path, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(action, e) from e


def _decode(raw: Any, action: str) -> Movie:
    try:
        return Movie.model_validate(raw)
    except PydanticValidationError as e:
        raise StorageError(action, e) from e
