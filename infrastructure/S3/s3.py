import re
from functools import lru_cache
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.exceptions import StorageError
from infrastructure.utils.datetime_utils import utc_now, to_timestamp_ms
from infrastructure.utils.logging_config import logger

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@lru_cache()
def get_s3_client():
    if settings.S3_CLOUDPROVIDER == "aws":
        # Default credential chain (env, profile, instance role)
        return boto3.client("s3", region_name=settings.S3_REGION)
    return boto3.client(
        "s3",
        endpoint_url=settings.S3_ENDPOINT,
        aws_access_key_id=settings.S3_ACCESSKEY,
        aws_secret_access_key=settings.S3_SECRETKEY,
        region_name=settings.S3_REGION
    )


def sanitize_filename(filename: Optional[str]) -> str:
    name = (filename or "").rsplit("/", 1)[-1].rsplit("\\", 1)[-1]
    name = _UNSAFE_KEY_CHARS.sub("_", name).strip("._")
    return name or "file"


def build_object_key(prefix: str, filename: Optional[str]) -> str:
    """``<prefix>/<epoch-millis>-<sanitised filename>``"""
    return f"{prefix.strip('/')}/{to_timestamp_ms(utc_now())}-{sanitize_filename(filename)}"


class ObjectStorage:
    """Uploads bytes to the configured bucket and returns a publicly reachable URL."""

    def __init__(self, client: Any = None, bucket: Optional[str] = None):
        self._client = client
        self.bucket = bucket or settings.S3_BUCKETNAME

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def public_url(self, key: str) -> str:
        if settings.S3_PUBLIC_BASE_URL:
            return f"{settings.S3_PUBLIC_BASE_URL.rstrip('/')}/{key}"
        if settings.S3_CLOUDPROVIDER == "aws":
            return f"https://{self.bucket}.s3.{settings.S3_REGION}.amazonaws.com/{key}"
        return f"{settings.S3_ENDPOINT.rstrip('/')}/{self.bucket}/{key}"

    def _put(self, data: bytes, key: str, content_type: Optional[str]) -> None:
        self.client.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type or "application/octet-stream",
        )

    async def upload(self, data: bytes, key: str, content_type: Optional[str] = None) -> str:
        logger.info(f"Uploading {len(data)} bytes to s3://{self.bucket}/{key}")
        try:
            # boto3 is blocking; keep it off the event loop
            await run_in_threadpool(self._put, data, key, content_type)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for key {key}: {e}", extra={"bucket": self.bucket, "key": key})
            raise StorageError() from e
        return self.public_url(key)
