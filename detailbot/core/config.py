from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    LINE_CHANNEL_SECRET: str | None = None
    LINE_CHANNEL_ACCESS_TOKEN: str | None = None
    LINE_REPLY_ENDPOINT: str = "https://api.line.me/v2/bot/message/reply"
    LINE_HTTP_TIMEOUT_SECONDS: float = 10.0

    BUSINESS_NAME: str = "汽車美容"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    AUTO_REPLY_ENABLED: bool = False


settings = Settings()
