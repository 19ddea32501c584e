from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        extra="ignore"  # Ignore extra fields in .env
    )

    database_url: str
    db_pool_size: int = 10
    db_max_overflow: int = 5

    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 30

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    host: str = "0.0.0.0"
    port: int = 8010

    frontend_url: Optional[List[str]] = None

    # External folder-structure generator, optional
    ai_service_url_folder_structure: Optional[str] = None
    ai_service_retries: int = 3
    ai_service_read_timeout: int = 120

settings = Settings()
