from pathlib import Path
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = f"sqlite:///{Path.cwd() / 'rentverse.sqlite'}"
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    jwt_secret: str = "change-me-in-production-rentverse-signing-key"
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 7 * 24 * 3600  # 7 days

    # LLM access is optional: without a key, search degrades to plain filters.
    groq_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("RENTVERSE_GROQ_API_KEY", "GROQ_API_KEY"),
    )
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model: str = "llama-3.3-70b-versatile"
    llm_timeout_seconds: float = 15.0

    # Broadcast endpoint of the hosted realtime service; unset disables publishing.
    realtime_url: str | None = None
    realtime_api_key: str | None = None
    realtime_timeout_seconds: float = 5.0

    search_result_limit: int = 30
    search_confidence: float = 0.95
    ranking_description_chars: int = 300
    notification_page_size: int = 50
    user_search_limit: int = 10
    recently_viewed_limit: int = 50
    min_password_length: int = 8

    model_config = {"env_prefix": "RENTVERSE_", "populate_by_name": True}


settings = Settings()
