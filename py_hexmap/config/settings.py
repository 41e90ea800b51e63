"""Application settings pulled from environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings (env prefix ``PY_HEXMAP_``, optional ``.env``)."""

    model_config = SettingsConfigDict(
        env_prefix="PY_HEXMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Map Generation Configuration
    default_map_width: int = Field(default=64, description="Default map width")
    default_map_height: int = Field(default=48, description="Default map height")
    max_map_width: int = Field(default=512, description="Max allowed map width")
    max_map_height: int = Field(default=512, description="Max allowed map height")
    default_preset: str = Field(default="default", description="Preset used when none is given")
    max_stored_maps: int = Field(
        default=100, ge=1, description="Generated maps kept in memory; oldest evicted first"
    )


settings = Settings()
