import logging
import uuid

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app

from product_manager.errors import UpstreamError

logger = logging.getLogger(__name__)

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png"}


def _get_client():
    return boto3.client(
        "s3",
        endpoint_url=current_app.config["S3_ENDPOINT_URL"] or None,
        aws_access_key_id=current_app.config["S3_ACCESS_KEY"] or None,
        aws_secret_access_key=current_app.config["S3_SECRET_KEY"] or None,
        region_name=current_app.config["S3_REGION"],
        config=BotoConfig(signature_version="s3v4"),
    )


def upload(storage_key, data, content_type="image/jpeg"):
    """Upload bytes to S3 as a publicly readable object."""
    client = _get_client()
    bucket = current_app.config["S3_BUCKET_NAME"]
    client.put_object(
        Bucket=bucket,
        Key=storage_key,
        Body=data,
        ContentType=content_type,
        ACL="public-read",
    )


def get_public_url(storage_key):
    """Return the public CDN URL for a storage key."""
    base = current_app.config["S3_PUBLIC_URL"].rstrip("/")
    return f"{base}/{storage_key}"


def delete(storage_key):
    """Delete an object from S3."""
    client = _get_client()
    bucket = current_app.config["S3_BUCKET_NAME"]
    client.delete_object(Bucket=bucket, Key=storage_key)


def build_storage_key(content_type):
    namespace = current_app.config["IMAGE_NAMESPACE"]
    ext = _EXTENSIONS.get(content_type, "jpg")
    return f"{namespace}/{uuid.uuid4().hex}.{ext}"


def upload_product_image(uploaded):
    """Push a validated upload to the image host.

    Returns:
        (storage_key, public_url)

    Raises:
        UpstreamError if the host rejects or cannot be reached
    """
    storage_key = build_storage_key(uploaded.mimetype)
    try:
        upload(storage_key, uploaded.data, content_type=uploaded.mimetype)
    except (BotoCoreError, ClientError) as e:
        logger.exception("Image upload failed for %s", storage_key)
        raise UpstreamError() from e

    logger.info("Uploaded image %s (%d bytes)", storage_key, len(uploaded.data))
    return storage_key, get_public_url(storage_key)


def discard(storage_key):
    """Best-effort removal of an image whose product was never saved."""
    try:
        delete(storage_key)
        logger.info("Removed orphaned image %s", storage_key)
    except (BotoCoreError, ClientError):
        logger.exception("Could not remove orphaned image %s", storage_key)
