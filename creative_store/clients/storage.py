"""Object storage client (S3)."""

import logging
from dataclasses import dataclass

import boto3

from ..config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadResult:
    """Location of a stored object."""

    url: str
    key: str


class StorageClient:
    """Upload rendered images to an S3 bucket."""

    def __init__(self, bucket: str, region: str = "us-east-1", s3=None):
        self.bucket = bucket
        self.region = region
        self._s3 = s3 or boto3.client("s3", region_name=region)

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageClient":
        return cls(bucket=settings.s3_bucket or "", region=settings.aws_region)

    def upload_image(self, key: str, data: bytes, content_type: str = "image/png") -> UploadResult:
        """
        Store image bytes under ``key``.

        Returns:
            UploadResult with the public object URL.
        """
        self._s3.put_object(
            Bucket=self.bucket,
            Key=key,
            Body=data,
            ContentType=content_type,
        )
        url = f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"
        logger.info(f"Uploaded {len(data)} bytes to s3://{self.bucket}/{key}")
        return UploadResult(url=url, key=key)
