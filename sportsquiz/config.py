"""
Configuration management using .env file
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from .env file"""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Upstage API (퀴즈 생성용 크리덴셜)
    upstage_api_key: str = ""
    generation_secret_name: str = "UPSTAGE_API_KEY"
    llm_model: str = "solar-pro"
    llm_timeout: int = 30  # seconds
    llm_temperature: float = 0.7

    # LangSmith
    langsmith_api_key: str = ""
    langsmith_project: str = "sports-quiz"
    langsmith_tracing: bool = False

    # Redis Document Store
    redis_url: str = ""  # Example: "redis://localhost:6379/0"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0
    redis_ssl: bool = False
    redis_key_prefix: str = "sportsquiz"
    use_redis_store: bool = False  # True for production, False for development

    # Application
    environment: str = "development"
    debug: bool = True
    log_dir: str = "logs"

    # Listing limits
    quiz_list_limit: int = 20
    attempt_list_limit: int = 10

    # CORS
    cors_origins: list = ["http://localhost:5173", "http://localhost:3000"]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
