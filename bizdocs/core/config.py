# bizdocs/core/config.py

from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from the process + optionally from a local .env file
    model_config = SettingsConfigDict(
        env_file=(".env",),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    APP_NAME: str = Field(default="bizdocs", validation_alias=AliasChoices("APP_NAME", "app_name"))
    ENVIRONMENT: str = Field(default="dev", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    # Document store
    STORE_BACKEND: str = Field(
        default="file",
        validation_alias=AliasChoices("STORE_BACKEND", "store_backend"),
    )
    STORE_PATH: str = Field(
        default="data/documents.json",
        validation_alias=AliasChoices("STORE_PATH", "store_path"),
    )
    STORE_KEY_PREFIX: str = Field(
        default="bizdocs:",
        validation_alias=AliasChoices("STORE_KEY_PREFIX", "store_key_prefix"),
    )
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        validation_alias=AliasChoices("REDIS_URL", "redis_url"),
    )

    # PDF export
    OUTPUT_DIR: str = Field(default="output", validation_alias=AliasChoices("OUTPUT_DIR", "output_dir"))
    LOGO_PATH: str = Field(default="", validation_alias=AliasChoices("LOGO_PATH", "logo_path"))
    EMPTY_ITEMS_POLICY: str = Field(
        default="placeholder",
        validation_alias=AliasChoices("EMPTY_ITEMS_POLICY", "empty_items_policy"),
    )
    FOOTER_PAGE_NUMBERS: bool = Field(
        default=True,
        validation_alias=AliasChoices("FOOTER_PAGE_NUMBERS", "footer_page_numbers"),
    )


settings = Settings()
