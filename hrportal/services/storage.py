"""
Object Storage

Thin wrapper around the MinIO client. Files never pass through the API:
the browser uploads and downloads directly with pre-signed URLs.

Works against MinIO locally and any S3-compatible store in production.
"""
from datetime import timedelta
from functools import lru_cache
import json
from minio import Minio
from hrportal.config import get_settings, Settings
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)


def public_read_policy(bucket: str) -> str:
    """Anonymous GetObject on every object in the bucket."""
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"AWS": ["*"]},
                "Action": ["s3:GetObject"],
                "Resource": [f"arn:aws:s3:::{bucket}/*"],
            }
        ],
    })


class StorageClient:
    """
    Pre-signed URL broker for the configured buckets.

    NOTE: the region is passed explicitly so presigning stays local
    instead of asking the server for the bucket location first.
    """

    def __init__(self, settings: Settings, client: Minio = None):
        self.settings = settings
        self.client = client or Minio(
            settings.STORAGE_ENDPOINT,
            access_key=settings.STORAGE_ACCESS_KEY,
            secret_key=settings.STORAGE_SECRET_KEY,
            secure=settings.STORAGE_SECURE,
            region=settings.STORAGE_REGION,
        )
        self.expires = timedelta(seconds=settings.PRESIGNED_URL_EXPIRE_SECONDS)

    @property
    def base_url(self) -> str:
        return self.settings.storage_base_url

    def object_url(self, bucket: str, object_name: str) -> str:
        """Public URL of an object (only readable for public buckets)."""
        return f"{self.base_url}/{bucket}/{object_name}"

    def upload_url(self, bucket: str, object_name: str) -> str:
        return self.client.presigned_put_object(bucket, object_name, expires=self.expires)

    def download_url(self, bucket: str, object_name: str) -> str:
        return self.client.presigned_get_object(bucket, object_name, expires=self.expires)

    def ensure_bucket(self, bucket: str, public: bool = False) -> bool:
        """
        Create the bucket if missing.

        Returns True when the bucket was created.
        """
        if self.client.bucket_exists(bucket):
            logger.info(f"Bucket already exists: {bucket}")
            return False

        self.client.make_bucket(bucket)
        if public:
            self.client.set_bucket_policy(bucket, public_read_policy(bucket))
        logger.info(f"Created bucket: {bucket} (public={public})")
        return True


@lru_cache()
def get_storage() -> StorageClient:
    """
    Dependency that provides the storage client.

    Cached like settings; tests override it with a fake.
    """
    return StorageClient(get_settings())
