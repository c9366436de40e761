from pydantic import ConfigDict
from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL


class MySqlSettings(BaseSettings):
    """Connection and pool configuration for the MySQL-family backend."""
    MYSQL_HOST: str = "mysql"
    MYSQL_PORT: int = 3306
    MYSQL_USER: str = "example_user"
    MYSQL_PASSWORD: str = "example_password"
    MYSQL_DATABASE: str = "example_db"
    MYSQL_POOL_SIZE: int = 10
    MYSQL_POOL_TIMEOUT: float = 30.0
    MYSQL_CONNECT_TIMEOUT: float = 2.0
    MYSQL_IDLE_TIMEOUT: int = 30
    MYSQL_PROBE_TIMEOUT: float = 2.0

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> URL:
        return URL.create(
            "mysql+aiomysql",
            username=self.MYSQL_USER,
            password=self.MYSQL_PASSWORD,
            host=self.MYSQL_HOST,
            port=self.MYSQL_PORT,
            database=self.MYSQL_DATABASE,
        )


class PostgresSettings(BaseSettings):
    """Connection and pool configuration for the PostgreSQL-family backend."""
    POSTGRES_HOST: str = "postgresql"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "example_user"
    POSTGRES_PASSWORD: str = "example_password"
    POSTGRES_DB: str = "example_db"
    POSTGRES_POOL_SIZE: int = 10
    POSTGRES_POOL_TIMEOUT: float = 30.0
    POSTGRES_CONNECT_TIMEOUT: float = 2.0
    POSTGRES_IDLE_TIMEOUT: int = 30
    POSTGRES_PROBE_TIMEOUT: float = 2.0

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def database_url(self) -> URL:
        return URL.create(
            "postgresql+asyncpg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )


def get_mysql_settings() -> MySqlSettings:
    return MySqlSettings()


def get_postgres_settings() -> PostgresSettings:
    return PostgresSettings()
