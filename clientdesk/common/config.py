import json

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from the environment and ``.env``."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_name: str = "Clientdesk API"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    app_port: int = 8000

    # e.g. postgresql+asyncpg://user:pass@db/clientdesk
    database_url: str

    # Bearer tokens
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    # Assigned at login to users stored without roles
    default_role: str = "ROLE_USER"

    # Project files live under <upload_dir>/<project_id>/
    upload_dir: str = "public/FileRepos"
    csv_export_filename: str = "clientes.csv"

    rate_limit_per_minute: int = 60

    # JSON list or a single origin
    cors_origins: list[str] | str = '["http://localhost:3000","http://localhost:8000"]'

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("rate_limit_per_minute", "jwt_expire_minutes")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


settings = Settings()
