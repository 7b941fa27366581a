import boto3
import pytest
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from mundolar.config import AppConfig
from mundolar.integrations.object_storage import (
    InvalidFolderError,
    ObjectStorage,
    key_from_public_url,
)


@pytest.fixture
def config():
    return AppConfig(
        r2_account_id="acct",
        r2_access_key_id="test-key",
        r2_secret_access_key="test-secret",
        r2_bucket_name="mundolar",
        r2_public_url="https://pub-123.r2.dev/",
        upload_url_expiry_seconds=300,
    )


@pytest.fixture
def s3_client():
    return boto3.client(
        "s3",
        region_name="auto",
        endpoint_url="https://acct.r2.cloudflarestorage.com",
        aws_access_key_id="test-key",
        aws_secret_access_key="test-secret",
        config=BotoConfig(signature_version="s3v4"),
    )


def test_key_from_public_url():
    assert key_from_public_url("https://pub-123.r2.dev/productos/radio.webp") == "productos/radio.webp"
    assert key_from_public_url("https://pub-123.r2.dev/marcas/logo%20kenwood.png") == "marcas/logo%20kenwood.png"


def test_presign_upload_builds_public_url(config, s3_client):
    storage = ObjectStorage(s3_client=s3_client, config=config)
    upload = storage.presign_upload("radio.webp", "image/webp", "productos")

    assert upload.key == "productos/radio.webp"
    assert upload.public_url == "https://pub-123.r2.dev/productos/radio.webp"
    assert "productos/radio.webp" in upload.signed_url
    assert "X-Amz-Expires=300" in upload.signed_url


def test_presign_upload_rejects_unknown_folder(config, s3_client):
    storage = ObjectStorage(s3_client=s3_client, config=config)
    with pytest.raises(InvalidFolderError):
        storage.presign_upload("x.webp", "image/webp", "../secrets")


def test_delete_by_public_url(config, s3_client):
    storage = ObjectStorage(s3_client=s3_client, config=config)
    with Stubber(s3_client) as stubber:
        stubber.add_response("delete_object", {}, {"Bucket": "mundolar", "Key": "categorias/portatiles.webp"})
        assert storage.delete_by_public_url("https://pub-123.r2.dev/categorias/portatiles.webp") is True
        stubber.assert_no_pending_responses()


def test_delete_missing_object_is_not_an_error(config, s3_client):
    storage = ObjectStorage(s3_client=s3_client, config=config)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("delete_object", service_error_code="NoSuchKey", http_status_code=404)
        assert storage.delete_by_public_url("https://pub-123.r2.dev/marcas/gone.webp") is False


def test_delete_propagates_other_errors(config, s3_client):
    storage = ObjectStorage(s3_client=s3_client, config=config)
    with Stubber(s3_client) as stubber:
        stubber.add_client_error("delete_object", service_error_code="AccessDenied", http_status_code=403)
        with pytest.raises(ClientError):
            storage.delete_by_public_url("https://pub-123.r2.dev/marcas/logo.webp")


def test_missing_account_raises(config):
    config.r2_account_id = None
    with pytest.raises(RuntimeError):
        ObjectStorage(config=config)
