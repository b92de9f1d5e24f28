"""S3 (or S3-compatible, e.g. MinIO) object store for finished video files."""
import logging
from typing import BinaryIO

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from tubely.config import Settings
from tubely.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def build_s3_client(settings: Settings):
    kwargs = {
        "region_name": settings.s3_region,
        "config": Config(signature_version="s3v4"),
    }
    if settings.s3_endpoint_url:
        kwargs["endpoint_url"] = settings.s3_endpoint_url
    # Empty keys = default credential chain (env, profile, instance role)
    if settings.s3_access_key_id and settings.s3_secret_access_key:
        kwargs["aws_access_key_id"] = settings.s3_access_key_id
        kwargs["aws_secret_access_key"] = settings.s3_secret_access_key
    return boto3.client("s3", **kwargs)


class S3ObjectStore:
    def __init__(self, settings: Settings, client=None):
        self.bucket = settings.s3_bucket
        self.client = client if client is not None else build_s3_client(settings)

    def put(self, key: str, body: BinaryIO, content_type: str) -> None:
        """Single PutObject. The object is durable only once this returns."""
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 put %s/%s failed: %s", self.bucket, key, e)
            raise StoreUnavailable("Couldn't upload to S3", detail=str(e)) from e
        logger.info("Uploaded s3://%s/%s (%s)", self.bucket, key, content_type)
