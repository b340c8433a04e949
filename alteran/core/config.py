from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "alteran.tech"
    debug: bool = False
    site_url: str = "https://alteran.tech"

    # Database
    database_url: str = "sqlite+aiosqlite:///./alteran.db"
    seed_demo_data: bool = False  # env: SEED_DEMO_DATA
    sql_echo: bool = False

    # Admin session
    auth_secret: str = ""
    admin_password: str = ""
    session_max_age: int = 60 * 60 * 24 * 7

    # GitHub
    github_token: str = ""
    github_graphql_url: str = "https://api.github.com/graphql"
    github_cache_ttl: int = 3600

    # OpenRouter
    openrouter_api_key: str = ""
    openrouter_api_url: str = "https://openrouter.ai/api/v1/chat/completions"
    openrouter_model: str = "anthropic/claude-sonnet-4"
    openrouter_fallback_model: str = "google/gemini-flash-1.5"
    openrouter_temperature: float = 0.7
    openrouter_max_tokens: int = 2048
    generation_language: str = "Russian"

    # Uploads
    upload_dir: str = "./uploads"
    upload_max_bytes: int = 5 * 1024 * 1024

    # Rendered page cache (seconds a public page is served before re-rendering)
    page_revalidate_seconds: int = 3600


@lru_cache
def get_settings() -> Settings:
    return Settings()
