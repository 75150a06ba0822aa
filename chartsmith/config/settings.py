from pathlib import Path

from pydantic_settings import BaseSettings
from pydantic import Field, ConfigDict


class Settings(BaseSettings):
    max_rows: int = Field(1_000_000, description="Maximum allowed rows per dataset")
    max_columns: int = Field(500, description="Maximum allowed columns per dataset")
    log_level: str = Field("INFO", description="Logging level")
    default_width: int = Field(800, description="Canvas width when a chart does not set one")
    default_height: int = Field(600, description="Canvas height when a chart does not set one")
    output_dir: Path = Field(
        Path.home() / "Desktop" / "chartsmith",
        description="Directory used by batch renders when no output directory is given",
    )
    cors_allow_origins: str = Field(
        "*",
        description="CORS allow origins for the API (use '*' or a comma-separated list)",
    )

    model_config = ConfigDict(env_prefix="CHARTSMITH_", case_sensitive=False)


settings = Settings()
