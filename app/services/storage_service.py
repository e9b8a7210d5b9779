"""
Object Storage Service - registration proof images.

Talks to MinIO (or any S3-compatible store) through boto3:
- make sure the bucket exists (idempotent)
- put an object
- hand out a time-limited GET URL for it
"""

import logging
from typing import Set

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings

logger = logging.getLogger(__name__)

_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}
_ALREADY_OWNED_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}


class StorageError(Exception):
    """Any failure talking to the object store."""


class StorageService:
    def __init__(self, client, region: str = "us-east-1"):
        self.client = client
        self.region = region
        self._known_buckets: Set[str] = set()

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageService":
        client = boto3.client(
            "s3",
            endpoint_url=settings.storage_endpoint_url,
            aws_access_key_id=settings.storage_access_key,
            aws_secret_access_key=settings.storage_secret_key,
            region_name=settings.storage_region,
            # MinIO serves buckets by path, not by virtual host
            config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
        return cls(client, region=settings.storage_region)

    def ensure_bucket(self, bucket: str) -> None:
        """Create the bucket if it does not exist yet."""
        if bucket in self._known_buckets:
            return
        try:
            self.client.head_bucket(Bucket=bucket)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "")
            if code not in _MISSING_BUCKET_CODES:
                raise StorageError(f"Cannot access bucket '{bucket}'") from exc
            self._create_bucket(bucket)
        except BotoCoreError as exc:
            raise StorageError(f"Cannot reach object storage for bucket '{bucket}'") from exc
        self._known_buckets.add(bucket)

    def _create_bucket(self, bucket: str) -> None:
        params = {"Bucket": bucket}
        if self.region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
        try:
            self.client.create_bucket(**params)
            logger.info("Created bucket %s", bucket)
        except ClientError as exc:
            # Another worker created it first
            if exc.response.get("Error", {}).get("Code", "") not in _ALREADY_OWNED_CODES:
                raise StorageError(f"Cannot create bucket '{bucket}'") from exc
        except BotoCoreError as exc:
            raise StorageError(f"Cannot create bucket '{bucket}'") from exc

    def put_object(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data, ContentType=content_type)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Cannot store object '{key}'") from exc

    def presigned_get_url(self, bucket: str, key: str, expires_in: int) -> str:
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Cannot sign URL for '{key}'") from exc
