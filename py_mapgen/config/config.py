from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (e.g., plain, json)")

    # Map Generation Configuration
    max_map_width: int = Field(default=500, description="Max allowed map width in cells")
    max_map_height: int = Field(default=500, description="Max allowed map height in cells")
    max_room_count: int = Field(default=200, description="Max rooms per request")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "MAPGEN_"
        extra = "ignore"


# Instantiate singleton settings object
settings = Settings()
