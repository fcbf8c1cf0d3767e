from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_ENV: str = "development"

    LOG_LEVEL: str = "INFO"
    # "console" or "json". Empty picks console in development, json elsewhere.
    LOG_FORMAT: str = ""

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://shop.example.com,https://admin.example.com"
    CORS_ORIGINS: str = "*"

    # External error tracking endpoint. Unset means errors are only logged locally.
    ERROR_TRACKING_URL: Optional[str] = None
    ERROR_TRACKING_TIMEOUT_SECONDS: float = 5.0

    # Simulated latency of the mock product API.
    API_DELAY_SECONDS: float = 0.0

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.strip().lower() == "development"

    @property
    def use_json_logs(self) -> bool:
        fmt = self.LOG_FORMAT.strip().lower()
        if fmt:
            return fmt == "json"
        return not self.is_development

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
