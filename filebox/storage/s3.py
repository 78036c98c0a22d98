"""
S3 blob store implementation.

Objects are written under a classification prefix:
<bucket>/raw/<remote_id> for binary objects and <bucket>/media/<remote_id>
for transformable media, so deleting an object requires the same
classification it was stored with.
"""
import asyncio
import mimetypes
from pathlib import Path
from urllib.parse import quote

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from filebox.logging_config import setup_logging
from filebox.storage.base import BlobStore, Classification, StoredObject
from filebox.storage.exceptions import BlobStoreError

logger = setup_logging()

KEY_PREFIXES = {
    Classification.BINARY: "raw",
    Classification.TRANSFORMABLE: "media",
}

# Transformable media is immutable once uploaded (re-upload creates a new object)
MEDIA_CACHE_CONTROL = "public, max-age=31536000, immutable"


class S3BlobStore(BlobStore):
    """
    Blob store backed by an S3-compatible bucket.

    The boto3 client is synchronous; every call runs in a worker thread so
    the request task only suspends while the remote call is in flight.
    """

    def __init__(
        self,
        bucket_name: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        public_base_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        client=None,
    ):
        """
        Initialize the S3 blob store.

        Args:
            bucket_name: Bucket all objects are written to
            region: AWS region of the bucket
            endpoint_url: Custom endpoint for S3-compatible services
            public_base_url: Base URL objects are served from (CDN), if any
            access_key_id: Explicit credentials (boto3 default chain otherwise)
            secret_access_key: Explicit credentials (boto3 default chain otherwise)
            client: Pre-built boto3 S3 client (mainly for tests)
        """
        self.bucket_name = bucket_name
        self.region = region
        self.endpoint_url = endpoint_url
        self._client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )
        self.base_url = self._build_base_url(public_base_url)

    async def put(
        self,
        file_path: Path,
        *,
        remote_id: str,
        content_type: str,
        filename: str,
        classification: Classification,
    ) -> StoredObject:
        key = self._get_key(remote_id, classification)

        extra_args = {
            "ContentType": content_type,
            "Metadata": {"classification": classification.value},
        }
        if classification is Classification.BINARY:
            # Served as-is: force a download with the user's filename
            extra_args["ContentDisposition"] = (
                f"attachment; filename*=UTF-8''{quote(filename)}"
            )
        else:
            extra_args["CacheControl"] = MEDIA_CACHE_CONTROL

        try:
            await asyncio.to_thread(
                self._client.upload_file,
                str(file_path),
                self.bucket_name,
                key,
                ExtraArgs=extra_args,
            )
        except (BotoCoreError, ClientError, S3UploadFailedError) as e:
            raise BlobStoreError("upload", remote_id, str(e)) from e

        logger.info(f"Stored object in bucket {self.bucket_name}: key={key}")

        return StoredObject(
            locator=f"{self.base_url}/{key}",
            remote_id=remote_id,
            format=self._get_format(filename, content_type),
            classification=classification,
        )

    async def delete(self, remote_id: str, classification: Classification) -> None:
        key = self._get_key(remote_id, classification)

        # S3 deletes are silent for missing keys; check first so a wrong
        # classification or an already-removed object is reported
        try:
            await asyncio.to_thread(
                self._client.head_object, Bucket=self.bucket_name, Key=key
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("404", "NoSuchKey", "NotFound"):
                raise BlobStoreError("delete", remote_id, "object not found") from e
            raise BlobStoreError("delete", remote_id, str(e)) from e
        except BotoCoreError as e:
            raise BlobStoreError("delete", remote_id, str(e)) from e

        try:
            await asyncio.to_thread(
                self._client.delete_object, Bucket=self.bucket_name, Key=key
            )
        except (BotoCoreError, ClientError) as e:
            raise BlobStoreError("delete", remote_id, str(e)) from e

        logger.info(f"Deleted object from bucket {self.bucket_name}: key={key}")

    def remote_id_from_locator(self, locator: str) -> str | None:
        prefix = f"{self.base_url}/"
        if not locator.startswith(prefix):
            return None

        # Locator layout: <base_url>/<raw|media>/<remote_id>
        key_prefix, _, remote_id = locator[len(prefix):].partition("/")
        if key_prefix not in KEY_PREFIXES.values() or not remote_id:
            return None

        return remote_id

    def _get_key(self, remote_id: str, classification: Classification) -> str:
        return f"{KEY_PREFIXES[classification]}/{remote_id}"

    def _build_base_url(self, public_base_url: str | None) -> str:
        if public_base_url:
            return public_base_url.rstrip("/")
        if self.endpoint_url:
            # Path-style addressing for S3-compatible services
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com"

    @staticmethod
    def _get_format(filename: str, content_type: str) -> str:
        suffix = Path(filename).suffix.lstrip(".").lower()
        if suffix:
            return suffix
        guessed = mimetypes.guess_extension(content_type) or ""
        return guessed.lstrip(".")
