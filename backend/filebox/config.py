"""Application configuration from environment variables."""
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All config comes from env vars or .env.filebox file."""

    DATA_DIR: str = "./data"
    UPLOAD_DIR: str = "./uploads"
    THUMBS_DIR: str = "./thumbs"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3001
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # Upload limits
    MAX_UPLOAD_FILES: int = 20
    MAX_UPLOAD_BYTES: int = 1024 * 1024 * 1024  # 1GB per file

    # Video thumbnails
    FFMPEG_PATH: str = "ffmpeg"
    THUMB_WIDTH: int = 480
    THUMB_SEEK_SECONDS: float = 1.0
    THUMB_TIMEOUT_SECONDS: Optional[float] = None  # None = wait for ffmpeg indefinitely

    STREAM_CHUNK_BYTES: int = 64 * 1024

    class Config:
        env_file = ".env.filebox"
        env_file_encoding = "utf-8"


settings = Settings()
