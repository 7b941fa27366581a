"""Presigned uploads and deletes against the Cloudflare R2 bucket.

Public URLs follow ``{r2_public_url}/{folder}/{file_name}``; the object key is
the URL path without its leading slash.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlparse

from mundolar.config import AppConfig, get_config
from mundolar.logging import get_logger

ALLOWED_FOLDERS = ("productos", "categorias", "marcas")


class InvalidFolderError(ValueError):
    """Raised for an upload folder outside the allow-list."""


@dataclass
class PresignedUpload:
    signed_url: str
    public_url: str
    key: str


def key_from_public_url(public_url: str) -> str:
    path = urlparse(public_url).path
    return path[1:] if path.startswith("/") else path


class ObjectStorage:
    """Thin wrapper over a boto3 S3 client pointed at R2."""

    def __init__(self, s3_client: Any = None, config: Optional[AppConfig] = None) -> None:
        self.config = config or get_config()
        self.logger = get_logger(__name__)
        self.bucket = self.config.r2_bucket_name
        self.public_base_url = (self.config.r2_public_url or "").rstrip("/")
        self.client = s3_client or self._build_client()

    def _build_client(self) -> Any:
        import boto3
        from botocore.config import Config as BotoConfig

        if not self.config.r2_account_id:
            self.logger.error("Missing R2 configuration values.")
            raise RuntimeError("Missing R2 configuration values.")
        self.logger.info(f"Instantiating R2 client for account: {self.config.r2_account_id}")
        return boto3.client(
            "s3",
            region_name="auto",
            endpoint_url=f"https://{self.config.r2_account_id}.r2.cloudflarestorage.com",
            aws_access_key_id=self.config.r2_access_key_id or "",
            aws_secret_access_key=self.config.r2_secret_access_key or "",
            config=BotoConfig(signature_version="s3v4"),
        )

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def presign_upload(self, file_name: str, content_type: str, folder: str) -> PresignedUpload:
        """Signed PUT URL for ``folder/file_name``, valid for the configured expiry."""
        if folder not in ALLOWED_FOLDERS:
            raise InvalidFolderError(folder)

        key = f"{folder}/{file_name}"
        signed_url = self.client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=self.config.upload_url_expiry_seconds,
        )
        return PresignedUpload(signed_url=signed_url, public_url=self.public_url(key), key=key)

    def delete_by_public_url(self, public_url: str) -> bool:
        """Delete the object behind ``public_url``.

        Returns False when the object was already gone.
        """
        from botocore.exceptions import ClientError

        key = key_from_public_url(public_url)
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "NoSuchKey":
                self.logger.info(f"Object already deleted: {key}")
                return False
            raise
        self.logger.info(f"Deleted object: {key}")
        return True


def get_object_storage() -> ObjectStorage:
    """Returns a new ObjectStorage using the latest config."""
    return ObjectStorage()
