from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

_ASYNC_DRIVER = "postgresql+asyncpg"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database — DATABASE_URL wins; discrete DB_* values are the fallback
    database_url: str = ""
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "postgres"
    db_sslmode: str = "disable"
    db_echo: bool = False

    # Connection pool
    db_pool_size: int = 25
    db_pool_recycle_seconds: int = 300
    db_pool_timeout_seconds: float = 30.0
    db_command_timeout_seconds: float = 5.0

    # Application
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"

    # Browser origin allowed to call the API (CORS + origin check)
    chat_url: str = ""

    @property
    def allowed_origin(self) -> str:
        return self.chat_url.strip().rstrip("/")

    @property
    def sqlalchemy_database_url(self) -> URL:
        """Async SQLAlchemy URL built from DATABASE_URL or the DB_* fallback."""
        if not self.database_url:
            query = {"ssl": self.db_sslmode} if self.db_sslmode else {}
            return URL.create(
                _ASYNC_DRIVER,
                username=self.db_user,
                password=self.db_password or None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
                query=query,
            )

        url = make_url(self.database_url)
        if url.drivername in ("postgres", "postgresql"):
            url = url.set(drivername=_ASYNC_DRIVER)
        # asyncpg takes ``ssl`` rather than libpq's ``sslmode``
        if url.drivername == _ASYNC_DRIVER and "sslmode" in url.query:
            sslmode = url.query["sslmode"]
            url = url.difference_update_query(["sslmode"]).update_query_dict({"ssl": sslmode})
        return url


settings = Settings()
