from logging import config as logging_config
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from .logger import build_logging

dotenv_path = ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )
    project_name: str = "Movie Store"
    log_level: str = "INFO"

    storage_backend: Literal["redis", "json"] = "redis"
    json_storage_path: str = "states/movies.json"

    redis_host: str = "127.0.0.1"
    redis_port: int = 6379
    redis_key: str = "movies"
    # seconds to keep retrying the startup ping
    redis_connect_max_time: int = 30

    anonymous_caller: str = "2vxsx-fae"


settings = Settings(_env_file=dotenv_path, _env_file_encoding="utf-8")  # type: ignore

logging_config.dictConfig(build_logging(settings.log_level))
