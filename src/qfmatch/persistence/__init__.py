"""Pluggable data provider backends behind Protocol interfaces."""

from __future__ import annotations

from qfmatch.core.config import AppSettings
from qfmatch.core.protocols import IDataProvider
from qfmatch.persistence.cache import CachedDataProvider, RedisCacheBackend
from qfmatch.persistence.filesystem_backend import FileSystemDataProvider
from qfmatch.persistence.s3_backend import S3DataProvider


def create_data_provider(settings: AppSettings | None = None) -> IDataProvider:
    """Create the data provider selected by application settings.

    The file system or S3 backend is optionally wrapped in a Redis
    read-through cache when ``cache_enabled`` is set.
    """
    if settings is None:
        settings = AppSettings()

    provider: IDataProvider
    if settings.storage_backend == "s3":
        provider = S3DataProvider(
            bucket=settings.s3.bucket,
            prefix=settings.s3.prefix,
            region=settings.s3.region,
            endpoint_url=settings.s3.endpoint_url,
        )
    else:
        provider = FileSystemDataProvider(settings.storage_dir)

    if settings.cache_enabled:
        cache = RedisCacheBackend(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
        )
        provider = CachedDataProvider(provider, cache, ttl=settings.cache_ttl)

    return provider
