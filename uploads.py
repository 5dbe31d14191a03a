"""
uploads.py - Image upload URLs for property photos

POST /upload
Body: {"fileName": "front.jpg", "fileType": "image/jpeg"}

With UPLOAD_BUCKET set, returns a presigned S3 PUT URL plus the public URL
the image will have once uploaded. Without it (local dev), returns mock URLs
so the front end's upload flow can still be exercised.
"""

import logging
import os
import uuid
from typing import Any, Dict, Optional

from common import AWS_REGION, UPLOAD_BUCKET, UPLOAD_URL_EXPIRES, s3_client
from errors import BadRequestError

logger = logging.getLogger(__name__)
logger.setLevel(os.getenv("LOG_LEVEL", "INFO"))

UPLOAD_PREFIX = "property-images"


def create_upload_url(
    data: Dict[str, Any],
    bucket: Optional[str] = None,
    s3=None
) -> Dict[str, str]:
    """
    Build an upload URL for a property image.

    Args:
        data: Request body with fileName and optional fileType
        bucket: S3 bucket for uploads (defaults to UPLOAD_BUCKET; unset returns mock URLs)
        s3: boto3 S3 client (created on demand)

    Returns:
        {"uploadUrl": ..., "imageUrl": ...}

    Raises:
        BadRequestError: fileName missing
    """
    file_name = data.get("fileName")
    if not file_name:
        raise BadRequestError("fileName is required")
    file_type = data.get("fileType") or "application/octet-stream"
    bucket = bucket or UPLOAD_BUCKET

    if not bucket:
        logger.info(f"No upload bucket configured, returning mock URLs for {file_name}")
        return {
            "uploadUrl": f"https://mock-upload-url.com/upload/{file_name}",
            "imageUrl": f"https://images.unsplash.com/photo-{uuid.uuid4().hex[:9]}?w=600&h=400&fit=crop"
        }

    # Prefix with a random id so two uploads of "photo.jpg" don't collide
    key = f"{UPLOAD_PREFIX}/{uuid.uuid4().hex}/{os.path.basename(file_name)}"
    s3 = s3 or s3_client()
    upload_url = s3.generate_presigned_url(
        "put_object",
        Params={"Bucket": bucket, "Key": key, "ContentType": file_type},
        ExpiresIn=UPLOAD_URL_EXPIRES
    )

    logger.info(f"Generated upload URL for s3://{bucket}/{key}")

    return {
        "uploadUrl": upload_url,
        "imageUrl": f"https://{bucket}.s3.{AWS_REGION}.amazonaws.com/{key}"
    }
