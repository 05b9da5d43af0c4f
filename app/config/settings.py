from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    db_enabled: bool = False
    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "cardscan"
    db_username: str = "cardscan"
    db_password: str = "secret"
    db_pool_max_size: int = 10
    db_connect_timeout_seconds: int = 5

    max_upload_bytes: int = 3 * 1024 * 1024
    image_codec: str = "pillow"

    extraction_provider: str = "anthropic"

    anthropic_api_key: str = ""
    anthropic_model_name: str = "claude-3-5-haiku-20241022"
    anthropic_max_tokens: int = 500
    anthropic_timeout_seconds: int = 30
    anthropic_base_url: str = "https://api.anthropic.com/v1"

    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_max_tokens: int = 500
    openai_timeout_seconds: int = 30

    openai_compatible_api_key: str = ""
    openai_compatible_model_name: str = ""
    openai_compatible_base_url: str = ""

    ocr_engine: str = "tesseract"
    ocr_language: str = "eng"
    tesseract_cmd: str = ""
