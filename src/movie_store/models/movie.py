from typing import Annotated, Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from movie_store.core.errors import ValidationError

NonEmptyStr = Annotated[str, Field(min_length=1)]


class MoviePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: NonEmptyStr
    description: NonEmptyStr
    produced_by: NonEmptyStr
    directed_by: NonEmptyStr
    main_artists: Annotated[list[NonEmptyStr], Field(min_length=1)]
    duration: NonEmptyStr
    trailer_image: NonEmptyStr


class Movie(MoviePayload):
    id: str
    owner: str
    created_at: int
    updated_at: Optional[int] = None

    def payload(self) -> MoviePayload:
        return MoviePayload.model_validate(
            self.model_dump(include=set(MoviePayload.model_fields))
        )


def validate_payload(data: Union[MoviePayload, Mapping[str, Any]]) -> MoviePayload:
    """Check a create/update payload and return it as a MoviePayload.

    Raises:
        ValidationError: a required field is missing, empty or of the wrong type.
    """
    if isinstance(data, MoviePayload):
        # re-run field checks, models built with model_construct skip them
        data = data.model_dump()
    try:
        return MoviePayload.model_validate(data)
    except PydanticValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "payload"
            for error in exc.errors()
        )
        raise ValidationError(f"Invalid movie payload: {fields}") from exc
