from pydantic import ConfigDict
from pydantic_settings import BaseSettings

from src.app.domain.models.backend import Backend


class ApiSettings(BaseSettings):
    APP_NAME: str = "Task API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    PORT: int = 3001
    FRONTEND_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"
    # When false only HEALTH_PRIMARY_BACKEND decides liveness; the other backend is advisory.
    HEALTH_REQUIRE_ALL_BACKENDS: bool = True
    HEALTH_PRIMARY_BACKEND: Backend = Backend.POSTGRESQL

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def expose_error_details(self) -> bool:
        return self.ENVIRONMENT.lower() != "production"


def get_api_settings() -> ApiSettings:
    return ApiSettings() # type: ignore[call-arg]
