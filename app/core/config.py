from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="QUIZ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Direct URL override (takes precedence if set)
    database_url: str | None = None

    # Individual DB params (used if database_url is not provided)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "wedding_quiz"
    db_user: str = "postgres"
    db_password: str = "postgres"

    # Keep raw string to avoid JSON parsing issues for lists
    cors_origins_raw: str = Field(default="*")
    media_root: Path = Path("media")

    admin_password: str | None = None
    secret_key: str = "change-me"
    app_url: str = "http://localhost:8000"
    cookie_secure: bool = False

    admin_session_days: int = 7
    participant_session_hours: int = 24
    active_window_minutes: int = 5

    poll_interval_seconds: float = 2.0
    reconnect_delay_seconds: float = 3.0

    max_upload_bytes: int = 5 * 1024 * 1024
    default_question_points: int = 10

    @property
    def assembled_db_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"postgresql+asyncpg://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def cors_origins(self) -> list[str]:
        raw = self.cors_origins_raw
        if not raw:
            return []
        return [part.strip() for part in raw.split(",") if part.strip()]

    @property
    def join_url_base(self) -> str:
        return self.app_url.strip().rstrip("/")


settings = Settings()
