"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Form Builder API"
    app_env: str = "development"
    cors_origins: str = "http://localhost:3000"
    use_in_memory_store: bool = True

    supabase_url: str | None = None
    supabase_service_key: str | None = None
    forms_table: str = "forms"
    questions_table: str = "formQuestions"
    page_breaks_table: str = "formPageBreaks"

    log_level: str = "INFO"
    log_json: bool = False

    max_condition_blocks: int = 15

    @property
    def cors_origins_list(self) -> list[str]:
        if self.cors_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
