from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # Database
    database_url: str

    # Auth
    secret_key: str
    jwt_algorithm: str = "HS256"
    session_ttl_minutes: int = 1440

    # Object storage (resumes, avatars, company logos)
    storage_dir: str = "/data/storage"
    storage_public_url: str = "/storage"
    max_upload_size_mb: int = 5

    # Comma-separated extra CORS origins
    allowed_origins: str = ""

    # App
    debug: bool = False


settings = Settings()
