from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./harmony.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    CORS_ORIGINS: str = "*"

    # Key under which the single user's engine document is stored.
    ENGINE_STATE_KEY: str = "default"

    # Level progression: points needed for level 2, and the growth per level.
    LEVEL_START_THRESHOLD: int = Field(default=100, gt=1)
    LEVEL_GROWTH_FACTOR: float = Field(default=1.5, gt=1, allow_inf_nan=False)

    # Room score history keeps this many days behind "today".
    HISTORY_RETENTION_DAYS: int = Field(default=90, ge=0)

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
