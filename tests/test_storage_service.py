"""
StorageService against a stubbed boto3 S3 client (no network).
Run: pytest tests/test_storage_service.py -v
"""

import boto3
import pytest
from botocore.client import Config
from botocore.stub import Stubber

from app.services.storage_service import StorageError, StorageService

BUCKET = "registration-approval-images"


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        endpoint_url="http://minio.local:9000",
        aws_access_key_id="minioadmin",
        aws_secret_access_key="minioadmin",
        region_name="us-east-1",
        config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
    )


class TestEnsureBucket:

    def test_creates_missing_bucket(self, s3_client):
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
            stubber.add_response("create_bucket", {}, {"Bucket": BUCKET})

            StorageService(s3_client).ensure_bucket(BUCKET)

            stubber.assert_no_pending_responses()

    def test_existing_bucket_checked_once(self, s3_client):
        storage = StorageService(s3_client)
        with Stubber(s3_client) as stubber:
            stubber.add_response("head_bucket", {}, {"Bucket": BUCKET})

            storage.ensure_bucket(BUCKET)
            storage.ensure_bucket(BUCKET)

            stubber.assert_no_pending_responses()

    def test_created_concurrently(self, s3_client):
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("head_bucket", service_error_code="NoSuchBucket", http_status_code=404)
            stubber.add_client_error("create_bucket", service_error_code="BucketAlreadyOwnedByYou", http_status_code=409)

            StorageService(s3_client).ensure_bucket(BUCKET)

    def test_access_denied(self, s3_client):
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("head_bucket", service_error_code="403", http_status_code=403)

            with pytest.raises(StorageError):
                StorageService(s3_client).ensure_bucket(BUCKET)


class TestObjects:

    def test_put_object(self, s3_client):
        with Stubber(s3_client) as stubber:
            stubber.add_response("put_object", {})

            StorageService(s3_client).put_object(BUCKET, "abc_register", b"png-bytes", "image/png")

            stubber.assert_no_pending_responses()

    def test_put_object_failure(self, s3_client):
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("put_object", service_error_code="InternalError", http_status_code=500)

            with pytest.raises(StorageError):
                StorageService(s3_client).put_object(BUCKET, "abc_register", b"png-bytes", "image/png")

    def test_presigned_url(self, s3_client):
        url = StorageService(s3_client).presigned_get_url(BUCKET, "abc_register", 10800)

        assert url.startswith(f"http://minio.local:9000/{BUCKET}/abc_register?")
        assert "X-Amz-Expires=10800" in url
        assert "X-Amz-Signature=" in url
