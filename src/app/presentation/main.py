import uvicorn

from src.setup.api_config import get_api_settings
from src.setup.app_config import configure_di
from src.setup.logging_config import configure_logging
from src.app.presentation.app import create_app

settings = get_api_settings()
configure_logging(settings.LOG_LEVEL)
configure_di(settings)

app = create_app(settings)


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
