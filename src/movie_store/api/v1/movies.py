from http import HTTPStatus
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from movie_store.core.context import CallContext, get_call_context
from movie_store.models.movie import Movie, MoviePayload
from movie_store.services.movie import MovieService, get_movie_service

router = APIRouter()


class MovieResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str
    produced_by: str
    directed_by: str
    main_artists: List[str]
    duration: str
    trailer_image: str
    owner: str
    created_at: int
    updated_at: Optional[int]

    @classmethod
    def from_model(cls, movie: Movie) -> "MovieResponse":
        return cls(**movie.model_dump())


@router.post(
    "/",
    response_model=MovieResponse,
    status_code=HTTPStatus.CREATED,
    summary="Create movie",
    description="Stores a new movie owned by the caller and returns it.",
    tags=["movies"],
)
async def create_movie(
    payload: MoviePayload,
    movie_service: Annotated[MovieService, Depends(get_movie_service)],
    context: Annotated[CallContext, Depends(get_call_context)],
) -> MovieResponse:
    movie = await movie_service.create_movie(payload, context)

    return MovieResponse.from_model(movie)


@router.get(
    "/",
    response_model=list[MovieResponse],
    summary="Movies list",
    description="Returns every stored movie in id order.",
    tags=["movies"],
)
async def list_movies(
    movie_service: Annotated[MovieService, Depends(get_movie_service)],
) -> list[MovieResponse]:
    movies = await movie_service.get_all_movies()

    return [MovieResponse.from_model(m) for m in movies]


@router.get(
    "/title/{title:path}",
    response_model=MovieResponse,
    summary="Movie by title",
    description="Returns the first movie whose title matches exactly.",
    tags=["movies"],
)
async def get_movie_by_title(
    title: str,
    movie_service: Annotated[MovieService, Depends(get_movie_service)],
) -> MovieResponse:
    movie = await movie_service.get_movie_by_title(title)

    return MovieResponse.from_model(movie)


@router.get(
    "/artist/{artist:path}",
    response_model=list[MovieResponse],
    summary="Movies by artist",
    description="Returns every movie listing the artist among its main artists.",
    tags=["movies"],
)
async def get_movies_by_artist(
    artist: str,
    movie_service: Annotated[MovieService, Depends(get_movie_service)],
) -> list[MovieResponse]:
    movies = await movie_service.get_movies_by_artist(artist)

    return [MovieResponse.from_model(m) for m in movies]


@router.get(
    "/{movie_id}",
    response_model=MovieResponse,
    summary="Movie details",
    tags=["movies"],
)
async def get_movie_by_id(
    movie_id: str,
    movie_service: Annotated[MovieService, Depends(get_movie_service)],
) -> MovieResponse:
    movie = await movie_service.get_movie_by_id(movie_id)

    return MovieResponse.from_model(movie)


@router.put(
    "/{movie_id}",
    response_model=MovieResponse,
    summary="Update movie",
    description="Replaces every payload field of the movie. "
    "The id, owner and creation time are kept.",
    tags=["movies"],
)
async def update_movie(
    movie_id: str,
    payload: MoviePayload,
    movie_service: Annotated[MovieService, Depends(get_movie_service)],
    context: Annotated[CallContext, Depends(get_call_context)],
) -> MovieResponse:
    movie = await movie_service.update_movie(movie_id, payload, context)

    return MovieResponse.from_model(movie)


@router.delete(
    "/{movie_id}",
    response_model=MovieResponse,
    summary="Delete movie",
    description="Removes the movie and returns it as it was before deletion.",
    tags=["movies"],
)
async def delete_movie(
    movie_id: str,
    movie_service: Annotated[MovieService, Depends(get_movie_service)],
) -> MovieResponse:
    movie = await movie_service.delete_movie(movie_id)

    return MovieResponse.from_model(movie)
