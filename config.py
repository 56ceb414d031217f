from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

env_path = Path(__file__).parent / ".env"

MULTIPART_OVERHEAD_BYTES = 64 * 1024

class Settings(BaseSettings):
    CDN_HOST: str = "0.0.0.0"
    CDN_PORT: int = 8000
    ENVIRONMENT: str = "development"
    API_PREFIX: str = ""
    MAX_FILE_SIZE_BYTES: int = 25 * 1024 * 1024
    MAX_REQUEST_SIZE_BYTES: int = 25 * 1024 * 1024 + MULTIPART_OVERHEAD_BYTES
    MAX_FILES_PER_REQUEST: int = 1
    CACHE_MAX_AGE_SECONDS: int = 3600
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=env_path, extra='ignore')

settings = Settings()

def get_settings() -> Settings:
    return settings
