import json

import pytest

from movie_store.core.context import CallContext
from movie_store.core.errors import NotFoundError, StorageError, ValidationError
from movie_store.models.movie import MoviePayload

REQUIRED_FIELDS = [
    "title",
    "description",
    "producedBy",
    "directedBy",
    "mainArtists",
    "duration",
    "trailerImage",
]


@pytest.mark.asyncio
async def test_create_then_get_returns_equal_record(
    movie_service, call_context, movie_payload
):
    created = await movie_service.create_movie(movie_payload, call_context)

    fetched = await movie_service.get_movie_by_id(created.id)

    assert fetched == created
    assert created.owner == call_context.caller
    assert created.updated_at is None
    assert created.title == movie_payload["title"]
    assert created.main_artists == movie_payload["mainArtists"]


@pytest.mark.asyncio
async def test_create_accepts_payload_model(movie_service, call_context, movie_payload):
    payload = MoviePayload.model_validate(movie_payload)

    created = await movie_service.create_movie(payload, call_context)

    assert created.payload() == payload


@pytest.mark.asyncio
async def test_create_generates_unique_ids(make_movies):
    movies = await make_movies()

    assert len({m.id for m in movies}) == len(movies)


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
@pytest.mark.asyncio
async def test_create_rejects_missing_field(
    movie_service, call_context, movie_payload, field
):
    del movie_payload[field]

    with pytest.raises(ValidationError, match=field):
        await movie_service.create_movie(movie_payload, call_context)

    assert await movie_service.get_all_movies() == []


@pytest.mark.parametrize(
    "field, value",
    [
        ("title", ""),
        ("description", ""),
        ("producedBy", ""),
        ("directedBy", ""),
        ("mainArtists", []),
        ("mainArtists", [""]),
        ("duration", ""),
        ("trailerImage", ""),
    ],
)
@pytest.mark.asyncio
async def test_create_rejects_empty_field(
    movie_service, call_context, movie_payload, field, value
):
    movie_payload[field] = value

    with pytest.raises(ValidationError):
        await movie_service.create_movie(movie_payload, call_context)

    assert await movie_service.get_all_movies() == []


@pytest.mark.asyncio
async def test_create_reports_storage_failure(
    movie_service, flaky_storage, call_context, movie_payload
):
    flaky_storage.fail_writes = True

    with pytest.raises(StorageError, match="disk full"):
        await movie_service.create_movie(movie_payload, call_context)

    flaky_storage.fail_writes = False
    assert await movie_service.get_all_movies() == []


@pytest.mark.asyncio
async def test_get_by_id_rejects_empty_id(movie_service):
    with pytest.raises(ValidationError):
        await movie_service.get_movie_by_id("")


@pytest.mark.asyncio
async def test_unknown_id_is_not_found(movie_service, call_context, movie_payload):
    await movie_service.create_movie(movie_payload, call_context)
    missing = "00000000-0000-4000-8000-000000000000"

    with pytest.raises(NotFoundError, match=missing):
        await movie_service.get_movie_by_id(missing)
    with pytest.raises(NotFoundError, match=missing):
        await movie_service.update_movie(missing, movie_payload, call_context)
    with pytest.raises(NotFoundError, match=missing):
        await movie_service.delete_movie(missing)


@pytest.mark.asyncio
async def test_get_by_title_returns_first_in_store_order(movie_service, make_movies):
    movies = await make_movies()
    dunes = sorted((m for m in movies if m.title == "Dune"), key=lambda m: m.id)

    found = await movie_service.get_movie_by_title("Dune")

    assert len(dunes) == 2
    assert found == dunes[0]


@pytest.mark.asyncio
async def test_get_by_title_is_case_sensitive(movie_service, make_movies):
    await make_movies()

    with pytest.raises(NotFoundError, match='"dune"'):
        await movie_service.get_movie_by_title("dune")


@pytest.mark.asyncio
async def test_get_by_artist(movie_service, make_movies):
    movies = await make_movies()

    found = await movie_service.get_movies_by_artist("Zendaya")

    assert found == [movies[0]]


@pytest.mark.asyncio
async def test_get_by_artist_needs_exact_match(movie_service, make_movies):
    await make_movies()

    with pytest.raises(NotFoundError, match="Zend"):
        await movie_service.get_movies_by_artist("Zend")


@pytest.mark.asyncio
async def test_get_by_artist_rejects_empty(movie_service):
    with pytest.raises(ValidationError):
        await movie_service.get_movies_by_artist("")


@pytest.mark.asyncio
async def test_get_all_movies_is_idempotent(movie_service, make_movies):
    movies = await make_movies()

    first = await movie_service.get_all_movies()
    second = await movie_service.get_all_movies()

    assert first == second
    assert [m.id for m in first] == sorted(m.id for m in movies)


@pytest.mark.asyncio
async def test_get_all_movies_reports_storage_failure(movie_service, flaky_storage):
    flaky_storage.fail_reads = True

    with pytest.raises(StorageError):
        await movie_service.get_all_movies()


@pytest.mark.asyncio
async def test_update_replaces_payload_and_keeps_metadata(
    movie_service, make_movies, movies_asset
):
    original, *_ = await make_movies()
    other_caller = CallContext(caller="someone-else", now=lambda: 42)
    new_payload = movies_asset[2]

    updated = await movie_service.update_movie(original.id, new_payload, other_caller)

    assert updated.id == original.id
    assert updated.owner == original.owner
    assert updated.created_at == original.created_at
    assert updated.payload() == MoviePayload.model_validate(new_payload)
    # clock went backwards, timestamps must not
    assert updated.updated_at == original.created_at
    assert await movie_service.get_movie_by_id(original.id) == updated


@pytest.mark.asyncio
async def test_update_timestamps_never_decrease(
    movie_service, call_context, movie_payload
):
    movie = await movie_service.create_movie(movie_payload, call_context)

    first = await movie_service.update_movie(movie.id, movie_payload, call_context)
    second = await movie_service.update_movie(movie.id, movie_payload, call_context)

    assert first.updated_at > movie.created_at
    assert second.updated_at >= first.updated_at


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
@pytest.mark.asyncio
async def test_update_rejects_missing_field(
    movie_service, call_context, movie_payload, field
):
    movie = await movie_service.create_movie(movie_payload, call_context)
    broken = {k: v for k, v in movie_payload.items() if k != field}

    with pytest.raises(ValidationError):
        await movie_service.update_movie(movie.id, broken, call_context)

    assert await movie_service.get_movie_by_id(movie.id) == movie


@pytest.mark.asyncio
async def test_update_leaves_record_when_write_fails(
    movie_service, flaky_storage, call_context, movies_asset
):
    movie = await movie_service.create_movie(movies_asset[0], call_context)
    flaky_storage.fail_writes = True

    with pytest.raises(StorageError):
        await movie_service.update_movie(movie.id, movies_asset[1], call_context)

    flaky_storage.fail_writes = False
    assert await movie_service.get_movie_by_id(movie.id) == movie


@pytest.mark.asyncio
async def test_delete_returns_record_and_removes_it(movie_service, make_movies):
    movie, *rest = await make_movies()

    deleted = await movie_service.delete_movie(movie.id)

    assert deleted == movie
    with pytest.raises(NotFoundError):
        await movie_service.get_movie_by_id(movie.id)
    assert len(await movie_service.get_all_movies()) == len(rest)


@pytest.mark.asyncio
async def test_delete_keeps_record_when_remove_fails(
    movie_service, flaky_storage, call_context, movie_payload
):
    movie = await movie_service.create_movie(movie_payload, call_context)
    flaky_storage.fail_writes = True

    with pytest.raises(StorageError, match="disk full"):
        await movie_service.delete_movie(movie.id)

    flaky_storage.fail_writes = False
    assert await movie_service.get_movie_by_id(movie.id) == movie


@pytest.mark.parametrize(
    "method, argument",
    [
        ("get_movie_by_id", "some-id"),
        ("get_movie_by_title", "Dune"),
        ("get_movies_by_artist", "Zendaya"),
    ],
)
@pytest.mark.asyncio
async def test_lookups_report_storage_failure(
    movie_service, flaky_storage, make_movies, method, argument
):
    await make_movies()
    flaky_storage.fail_reads = True

    with pytest.raises(StorageError):
        await getattr(movie_service, method)(argument)


@pytest.mark.asyncio
async def test_malformed_stored_record_is_storage_error(
    movie_service, json_storage_path
):
    json_storage_path.write_text(json.dumps({"a": {"title": 1}}))

    with pytest.raises(StorageError):
        await movie_service.get_all_movies()
    with pytest.raises(StorageError):
        await movie_service.get_movie_by_id("a")
