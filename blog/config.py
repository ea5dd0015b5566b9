from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Blog GraphQL API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Server settings (used when running main.py directly)
    host: str = "0.0.0.0"
    port: int = 3000

    # Database settings
    database_url: str
    auto_create_tables: bool = True

    # GraphQL settings
    graphiql: bool = True
    viewer_id: str = "me"

    # Request handling
    request_timeout_seconds: float = 30.0

    # Logging settings
    log_level: str = "INFO"
    json_logs: bool = True
    log_file: str | None = None

    # CORS settings
    allowed_origins: list[str] = ["http://localhost:9000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
