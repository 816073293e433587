from functools import lru_cache
import os
from typing import Literal

from pydantic import BaseModel, Field


class Settings(BaseModel):
    env: str = Field(default="dev", alias="ENV")
    timezone: str = Field(default="Australia/Sydney", alias="TIMEZONE")

    database_url: str = Field(default="", alias="DATABASE_URL")
    postgres_db: str = Field(default="gymmonitor", alias="POSTGRES_DB")
    postgres_user: str = Field(default="gymmonitor", alias="POSTGRES_USER")
    postgres_password: str = Field(default="gymmonitor", alias="POSTGRES_PASSWORD")
    postgres_host: str = Field(default="localhost", alias="POSTGRES_HOST")
    postgres_port: int = Field(default=5432, alias="POSTGRES_PORT")

    jwt_secret: str = Field(default="secret", alias="JWT_SECRET")
    jwt_expire_min: int = Field(default=1440, alias="JWT_EXPIRE_MIN")

    weekly_booking_limit: int = Field(default=10, ge=1, alias="WEEKLY_BOOKING_LIMIT")
    booking_window_policy: Literal["rolling", "class_week"] = Field(
        default="rolling", alias="BOOKING_WINDOW_POLICY"
    )

    billing_enabled: bool = Field(default=True, alias="BILLING_ENABLED")
    billing_hour: int = Field(default=2, ge=0, le=23, alias="BILLING_HOUR")
    billing_minute: int = Field(default=0, ge=0, le=59, alias="BILLING_MINUTE")

    seed_demo_data: bool = Field(default=False, alias="SEED_DEMO_DATA")

    class Config:
        populate_by_name = True

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(**os.environ)
