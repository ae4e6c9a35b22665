from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Banco de dados
    DATABASE_URL: str
    DATABASE_ECHO: bool = False

    # Public origin used for share links and local blob URLs
    PUBLIC_BASE_URL: str = "http://localhost:8000"

    # Blob storage: "local" or "supabase"
    BLOB_BACKEND: str = "local"
    BLOB_LOCAL_DIR: str = "./media"
    BLOB_PUBLIC_PATH: str = "/media"
    BLOB_BUCKET: str = "quiz-images"
    SUPABASE_URL: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Image limits
    MAX_INLINE_IMAGE_BYTES: int = 2 * 1024 * 1024
    MAX_UPLOAD_IMAGE_BYTES: int = 7 * 1024 * 1024

    STORE_TIMEOUT_SECONDS: float = 10.0

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()
