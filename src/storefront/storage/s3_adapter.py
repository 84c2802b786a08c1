"""S3 (or S3-compatible) object storage via boto3."""

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from storefront.storage.port import ObjectStorage, StorageError

logger = structlog.get_logger(__name__)


class S3Storage(ObjectStorage):
    def __init__(self, bucket: str, region: str, endpoint_url: str | None = None, public_url: str | None = None, client=None):
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_url = public_url
        self._client = client

    def _get_client(self):
        if self._client is None:
            kwargs = {"region_name": self.region}
            if self.endpoint_url:
                kwargs["endpoint_url"] = self.endpoint_url
            self._client = boto3.client("s3", **kwargs)
        return self._client

    def url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, data: bytes, key: str, content_type: str) -> str:
        try:
            self._get_client().put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as exc:
            logger.error("s3_upload_failed", bucket=self.bucket, key=key, error=str(exc))
            raise StorageError(f"Failed to upload {key}") from exc
        return self.url_for(key)
