import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the API process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # uvicorn's access log duplicates the request logging middleware.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
