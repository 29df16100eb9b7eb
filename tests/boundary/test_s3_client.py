"""
Test suite for S3StorageClient.

Tests presigned URLs, existence checks, bulk deletes and AWS error
translation against a mocked boto3 client.

System role: Verification of S3 boundary access
"""

from unittest.mock import MagicMock

import pytest

from contract_engine.boundary.aws.s3_client import S3StorageClient
from contract_engine.core.exceptions import AwsServiceError


@pytest.fixture
def boto_s3() -> MagicMock:
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://signed.example/url"
    return client


@pytest.fixture
def s3(boto_s3: MagicMock) -> S3StorageClient:
    return S3StorageClient("test-bucket", region="us-east-2", client=boto_s3)


def paginate(boto_s3: MagicMock, *pages: list[str]) -> None:
    paginator = MagicMock()
    paginator.paginate.return_value = [{"Contents": [{"Key": key} for key in page]} for page in pages]
    boto_s3.get_paginator.return_value = paginator


class TestPresignedUrls:
    def test_download_url_sets_disposition(self, s3: S3StorageClient, boto_s3: MagicMock) -> None:
        url, expires_at = s3.generate_presigned_download_url("contracts/a.docx", expires_in=60, file_name="a.docx")

        assert url == "https://signed.example/url"
        assert expires_at is not None
        params = boto_s3.generate_presigned_url.call_args.kwargs["Params"]
        assert params["Bucket"] == "test-bucket"
        assert params["ResponseContentDisposition"] == 'attachment; filename="a.docx"'

    def test_upload_url(self, s3: S3StorageClient, boto_s3: MagicMock) -> None:
        s3.generate_presigned_upload_url("templates/t.docx", content_type="text/html")

        call = boto_s3.generate_presigned_url.call_args.kwargs
        assert call["ClientMethod"] == "put_object"
        assert call["Params"]["ContentType"] == "text/html"


class TestFileExists:
    def test_exists(self, s3: S3StorageClient) -> None:
        assert s3.file_exists("key") is True

    def test_missing(self, s3: S3StorageClient, boto_s3: MagicMock, client_error) -> None:
        boto_s3.head_object.side_effect = client_error("404", "HeadObject")
        assert s3.file_exists("key") is False

    def test_access_denied_raises(self, s3: S3StorageClient, boto_s3: MagicMock, client_error) -> None:
        boto_s3.head_object.side_effect = client_error("AccessDenied", "HeadObject")

        with pytest.raises(AwsServiceError) as exc_info:
            s3.file_exists("key")

        assert exc_info.value.code == "AccessDenied"
        assert exc_info.value.service == "s3"
        assert exc_info.value.operation == "file_exists"
        assert exc_info.value.hints


def test_put_object_encrypts(s3: S3StorageClient, boto_s3: MagicMock) -> None:
    s3.put_object("k", b"data", content_type="text/plain", metadata={"a": "b"})

    call = boto_s3.put_object.call_args.kwargs
    assert call["ServerSideEncryption"] == "AES256"
    assert call["Metadata"] == {"a": "b"}


def test_get_object_bytes(s3: S3StorageClient, boto_s3: MagicMock) -> None:
    boto_s3.get_object.return_value = {"Body": MagicMock(read=MagicMock(return_value=b"abc"))}
    assert s3.get_object_bytes("k") == b"abc"


def test_transient_errors_retried(s3: S3StorageClient, boto_s3: MagicMock, client_error) -> None:
    boto_s3.head_bucket.side_effect = [client_error("SlowDown"), {"ok": True}]

    assert s3.head_bucket() == {"ok": True}
    assert boto_s3.head_bucket.call_count == 2


def test_list_keys_follows_pages(s3: S3StorageClient, boto_s3: MagicMock) -> None:
    paginate(boto_s3, ["a", "b"], ["c"])
    assert s3.list_keys("contracts/") == ["a", "b", "c"]


class TestDeletes:
    """Test chunked deletes and prefix cleanup."""

    def test_delete_keys_chunks(self, s3: S3StorageClient, boto_s3: MagicMock) -> None:
        boto_s3.delete_objects.side_effect = lambda **kwargs: {"Deleted": kwargs["Delete"]["Objects"]}

        deleted, failed = s3.delete_keys([f"k{i}" for i in range(1500)])

        assert deleted == 1500
        assert failed == []
        assert boto_s3.delete_objects.call_count == 2

    def test_delete_keys_reports_failures(self, s3: S3StorageClient, boto_s3: MagicMock) -> None:
        boto_s3.delete_objects.return_value = {
            "Deleted": [{"Key": "a"}],
            "Errors": [{"Key": "b", "Code": "AccessDenied"}],
        }

        assert s3.delete_keys(["a", "b"]) == (1, ["b"])

    def test_delete_prefix_dry_run(self, s3: S3StorageClient, boto_s3: MagicMock) -> None:
        paginate(boto_s3, ["contracts/immutable/x/1/a.docx"])

        result = s3.delete_prefix("contracts/immutable/", dry_run=True)

        assert result["found"] == 1
        assert result["deleted"] == 0
        assert result["keys"] == ["contracts/immutable/x/1/a.docx"]
        boto_s3.delete_objects.assert_not_called()

    def test_delete_prefix(self, s3: S3StorageClient, boto_s3: MagicMock) -> None:
        paginate(boto_s3, ["p/a", "p/b"])
        boto_s3.delete_objects.return_value = {"Deleted": [{"Key": "p/a"}, {"Key": "p/b"}]}

        result = s3.delete_prefix("p/")

        assert result["deleted"] == 2
        assert result["dry_run"] is False
