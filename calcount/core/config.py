from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = "sqlite:///./calcount.db"

    # without a key the LLM estimator fails fast; the rest of the API works
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4.1-mini"

    internal_api_token: Optional[str] = None

    # IANA name; used when a request does not pass ?tz=
    default_timezone: str = "UTC"

    media_root: str = "./media"
    media_url_prefix: str = "/media"
    max_upload_mb: int = 10

    openfoodfacts_base_url: str = "https://world.openfoodfacts.org/api/v2"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
