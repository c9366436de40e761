from enum import Enum


class Backend(str, Enum):
    """Database engines the API can serve tasks from."""

    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
