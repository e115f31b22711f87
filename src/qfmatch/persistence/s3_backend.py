"""S3 object store backend implementing IDataProvider."""

from __future__ import annotations

import json
from typing import Any

import boto3
from botocore.exceptions import ClientError

from qfmatch.core.exceptions import DataFileNotFoundError, DataProviderError

_MISSING_CODES = {"NoSuchKey", "404", "NotFound"}


class S3DataProvider:
    """Production IDataProvider backed by S3."""

    def __init__(self, bucket: str, prefix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._bucket = bucket
        self._prefix = prefix.strip("/")
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._client = boto3.client("s3", **kwargs)

    def _key(self, path: str) -> str:
        return f"{self._prefix}/{path}" if self._prefix else path

    def load(self, description: str, path: str) -> Any:
        key = self._key(path)
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code in _MISSING_CODES:
                raise DataFileNotFoundError(description) from exc
            raise DataProviderError(f"S3 read failed for {key!r}: {exc}") from exc
        return json.loads(resp["Body"].read())
