from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # General
    LOG_LEVEL: str = Field(default="INFO", description="Application log level")
    BIND: str = Field(default="0.0.0.0:8076", description="API bind address")
    SITE_URL: str = Field(default="https://www.travelkitchen.app", description="Public site URL used in the sitemap")

    # CORS
    CORS_ALLOW_ORIGINS: str = Field(default="*", description="Comma-separated list of allowed origins")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True, description="Allow credentials in CORS")
    CORS_ALLOW_METHODS: str = Field(default="*", description="Allowed CORS methods")
    CORS_ALLOW_HEADERS: str = Field(default="*", description="Allowed CORS headers")

    # LLM
    OPENAI_API_KEY: str = Field(default="", description="OpenAI API key")
    OPENAI_BASE_URL: str = Field(default="https://api.openai.com/v1", description="OpenAI base URL")
    CHAT_MODEL: str = Field(default="gpt-4o-mini", description="Chat model ID")
    MAX_TOKENS: int = Field(default=4096, description="Maximum token count")
    TEMPERATURE: float = Field(default=0.7, description="Temperature")
    LLM_MAX_CONCURRENCY: int = Field(default=10, description="Maximum concurrency for LLM requests")
    LLM_REQUEST_TIMEOUT: int = Field(default=60, description="LLM HTTP timeout (seconds)")

    # Data Layer
    MONGODB_URI: str = Field(
        default="mongodb://mongo:27017/travelkitchen",
        description="MongoDB connection URI",
        validation_alias="MONGO_URI",
    )
    MONGODB_DB: str = Field(
        default="travelkitchen",
        description="MongoDB database name",
        validation_alias="MONGO_DB",
    )

    # Auth provider
    AUTH_SESSION_URL: str = Field(
        default="http://auth:3000/api/auth/get-session",
        description="Auth provider endpoint resolving a bearer token to its user",
    )
    AUTH_REQUEST_TIMEOUT: int = Field(default=10, description="Auth provider HTTP timeout (seconds)")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
