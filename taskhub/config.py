from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    app_name: str = "TaskHub API"
    db_user: str = Field(default="postgres")
    db_host: str = Field(default="localhost")
    db_password: str = Field(default="postgres")
    db_port: int = Field(default=5432)
    db_name: str = Field(default="taskhub")
    # When set, takes precedence over the DB_* fields (handy for SQLite).
    database_url: Optional[str] = Field(default=None)
    sql_echo: bool = False
    host: str = "0.0.0.0"
    port: int = Field(default=3000)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        url = URL.create(
            "postgresql+psycopg",
            username=self.db_user,
            password=self.db_password,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)


settings = Settings()
