"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class S3Config(BaseSettings):
    """S3 data storage configuration."""

    model_config = {"env_prefix": "QFMATCH_S3_"}

    bucket: str = "qfmatch-round-data"
    prefix: str = ""  # key prefix prepended to every resource path
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis resource cache configuration."""

    model_config = {"env_prefix": "QFMATCH_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "QFMATCH_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    storage_backend: Literal["filesystem", "s3"] = "filesystem"
    storage_dir: str = "./data"
    cache_enabled: bool = False
    cache_ttl: int = 60

    s3: S3Config = S3Config()
    redis: RedisConfig = RedisConfig()
