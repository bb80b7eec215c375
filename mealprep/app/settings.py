from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", protected_namespaces=()
    )

    # Keys must be provided via env / .env (never hardcode secrets in code)
    completion_api_key: str | None = Field(
        None, validation_alias=AliasChoices("completion_api_key", "groq_api_key")
    )
    completion_base_url: str = "https://api.groq.com/openai/v1"
    model_name: str = "mixtral-8x7b-32768"
    completion_temperature: float = 0.7
    completion_max_tokens: int = 1500
    request_timeout: float = 30.0

    database_url: str = "sqlite:///./mealprep.db"

    # Userinfo endpoint of the identity provider; None disables session lookup
    identity_userinfo_url: str | None = None

    placeholder_email: str = "no-email@example.com"
    log_level: str = "INFO"


settings = Settings()  # load once at import
