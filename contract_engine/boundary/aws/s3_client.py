"""
S3 client for the contract storage bucket.

Handles presigned URLs, object reads/writes, listing and bulk deletes.

Dependencies: boto3
System role: API-level and operational S3 access
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Iterator

from botocore.exceptions import ClientError

from contract_engine.boundary.aws.client_errors import translate_client_errors
from contract_engine.boundary.aws.session import get_boto3_session

logger = logging.getLogger(__name__)

DELETE_BATCH_SIZE = 1000


class S3StorageClient:
    """S3 client for the contract storage bucket."""

    def __init__(self, bucket: str, region: str | None = None, client: Any = None) -> None:
        """
        Initialize S3 client for the storage bucket.

        Args:
            bucket: S3 bucket name
            region: AWS region of the bucket
            client: Pre-built boto3 S3 client (tests inject a mock here)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or get_boto3_session().client("s3", region_name=region)

    @property
    def bucket(self) -> str:
        return self._bucket

    @translate_client_errors("s3")
    def generate_presigned_upload_url(
        self,
        s3_key: str,
        content_type: str = "application/octet-stream",
        expires_in: int = 3600,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for uploading a file.

        Args:
            s3_key: S3 object key (path in bucket)
            content_type: MIME type of the file
            expires_in: URL expiry in seconds (default 1 hour)

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)
        """
        presigned_url = self._s3_client.generate_presigned_url(
            ClientMethod="put_object",
            Params={
                "Bucket": self._bucket,
                "Key": s3_key,
                "ContentType": content_type,
            },
            ExpiresIn=expires_in,
        )
        expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
        return presigned_url, expires_at

    @translate_client_errors("s3")
    def generate_presigned_download_url(
        self,
        s3_key: str,
        expires_in: int = 3600,
        file_name: str | None = None,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for downloading an S3 object.

        Args:
            s3_key: S3 object key (path in bucket)
            expires_in: URL expiry in seconds (default 1 hour)
            file_name: Optional download name for Content-Disposition

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)
        """
        params: dict[str, Any] = {"Bucket": self._bucket, "Key": s3_key}
        if file_name:
            params["ResponseContentDisposition"] = f'attachment; filename="{file_name}"'
        presigned_url = self._s3_client.generate_presigned_url(
            ClientMethod="get_object",
            Params=params,
            ExpiresIn=expires_in,
        )
        expires_at = datetime.utcnow() + timedelta(seconds=expires_in)
        return presigned_url, expires_at

    @translate_client_errors("s3")
    def file_exists(self, s3_key: str) -> bool:
        """
        Check if a file exists in S3.

        Args:
            s3_key: S3 object key to check

        Returns:
            bool: True if file exists, False on 404
        """
        try:
            self._s3_client.head_object(Bucket=self._bucket, Key=s3_key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise

    @translate_client_errors("s3")
    def put_object(
        self,
        s3_key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
        metadata: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """
        Write an object with AES256 server-side encryption.

        Args:
            s3_key: Destination key
            body: Object content
            content_type: MIME type
            metadata: User metadata (x-amz-meta-*)

        Returns:
            dict: Raw put_object response
        """
        response = self._s3_client.put_object(
            Bucket=self._bucket,
            Key=s3_key,
            Body=body,
            ContentType=content_type,
            Metadata=metadata or {},
            ServerSideEncryption="AES256",
        )
        logger.debug("Object written", extra={"key": s3_key, "size": len(body)})
        return response

    @translate_client_errors("s3")
    def get_object_bytes(self, s3_key: str) -> bytes:
        """Read a whole object into memory."""
        response = self._s3_client.get_object(Bucket=self._bucket, Key=s3_key)
        return response["Body"].read()

    @translate_client_errors("s3")
    def head_object(self, s3_key: str) -> dict[str, Any]:
        """Get object metadata (ContentLength, Metadata, LastModified...)."""
        return self._s3_client.head_object(Bucket=self._bucket, Key=s3_key)

    def iter_objects(self, prefix: str = "") -> Iterator[dict[str, Any]]:
        """Yield every object summary under a prefix, following pagination."""
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
            yield from page.get("Contents", [])

    @translate_client_errors("s3")
    def list_objects(self, prefix: str = "") -> list[dict[str, Any]]:
        """List object summaries (Key, Size, LastModified) under a prefix."""
        return list(self.iter_objects(prefix))

    @translate_client_errors("s3")
    def list_keys(self, prefix: str = "") -> list[str]:
        """List every key under a prefix."""
        return [obj["Key"] for obj in self.iter_objects(prefix)]

    @translate_client_errors("s3")
    def delete_keys(self, keys: list[str]) -> tuple[int, list[str]]:
        """
        Delete keys in chunks of 1000.

        Args:
            keys: Keys to delete

        Returns:
            tuple[int, list[str]]: (deleted count, keys that failed)
        """
        deleted = 0
        failed: list[str] = []
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            chunk = keys[start:start + DELETE_BATCH_SIZE]
            response = self._s3_client.delete_objects(
                Bucket=self._bucket,
                Delete={"Objects": [{"Key": key} for key in chunk], "Quiet": False},
            )
            deleted += len(response.get("Deleted", []))
            for error in response.get("Errors", []):
                failed.append(error.get("Key", ""))
                logger.warning(
                    "Object delete failed",
                    extra={"key": error.get("Key"), "code": error.get("Code")},
                )
        return deleted, failed

    def delete_prefix(self, prefix: str, dry_run: bool = False) -> dict[str, Any]:
        """
        Delete everything under a prefix.

        Args:
            prefix: Key prefix to clear
            dry_run: Only report what would be deleted

        Returns:
            dict: prefix, found, deleted, failed, dry_run, keys (first 20)
        """
        keys = self.list_keys(prefix)
        result: dict[str, Any] = {
            "prefix": prefix,
            "found": len(keys),
            "deleted": 0,
            "failed": [],
            "dry_run": dry_run,
            "keys": keys[:20],
        }
        if dry_run or not keys:
            return result

        deleted, failed = self.delete_keys(keys)
        result["deleted"] = deleted
        result["failed"] = failed
        logger.info(
            "Prefix cleared",
            extra={"prefix": prefix, "deleted": deleted, "failed": len(failed)},
        )
        return result

    @translate_client_errors("s3")
    def head_bucket(self) -> dict[str, Any]:
        """Check the bucket exists and is reachable with current credentials."""
        return self._s3_client.head_bucket(Bucket=self._bucket)
