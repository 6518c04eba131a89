"""
Cloudinary Service - Image blob storage for listing photos

Keys are Cloudinary public ids ("<folder>/<uuid>-<millis>"). Without
credentials uploads return a placeholder URL and deletes are no-ops, so the
API stays usable in development.
"""
import asyncio
import logging
import re
import time
import uuid
from typing import Optional, Dict, Iterable
from urllib.parse import urlparse
import cloudinary
import cloudinary.uploader
from app.config import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/400x300/cccccc/666666?text=Uploaded%20Image"
DEFAULT_FOLDER = "properties"

_VERSION_SEGMENT = re.compile(r"^v\d+$")

_cloudinary_configured = False


class StorageError(Exception):
    pass


def _ensure_cloudinary_configured():
    """Ensure Cloudinary is configured"""
    global _cloudinary_configured
    if not _cloudinary_configured:
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            secure=True
        )
        _cloudinary_configured = True


def generate_key(folder: str = DEFAULT_FOLDER) -> str:
    folder = (folder or DEFAULT_FOLDER).strip("/")
    return f"{folder}/{uuid.uuid4()}-{int(time.time() * 1000)}"


def _upload(file_content: bytes, key: str) -> Dict:
    _ensure_cloudinary_configured()
    return cloudinary.uploader.upload(
        file_content,
        public_id=key,
        resource_type="image",
        overwrite=False
    )


def _destroy(key: str) -> Dict:
    _ensure_cloudinary_configured()
    return cloudinary.uploader.destroy(key, resource_type="image")


async def upload_image(file_content: bytes, content_type: str, folder: str = DEFAULT_FOLDER) -> Dict:
    """
    Upload an image and return {"url", "key"}.

    Raises StorageError when the provider rejects the upload.
    """
    key = generate_key(folder)

    if not settings.storage_configured:
        logger.warning("Cloudinary not configured, returning placeholder image URL")
        return {"url": PLACEHOLDER_IMAGE_URL, "key": key}

    try:
        result = await asyncio.to_thread(_upload, file_content, key)
    except Exception as e:
        logger.error(f"Cloudinary upload failed for {key} ({content_type}): {str(e)}", exc_info=True)
        raise StorageError(f"Failed to upload image: {str(e)}")

    return {
        "url": result["secure_url"],
        "key": result.get("public_id", key),
    }


async def delete_image(key: str) -> bool:
    """Best-effort delete; False when the provider reports a failure"""
    if not settings.storage_configured:
        logger.info(f"Cloudinary not configured, skipping delete of {key}")
        return True

    try:
        result = await asyncio.to_thread(_destroy, key)
    except Exception as e:
        logger.error(f"Error deleting {key} from Cloudinary: {str(e)}", exc_info=True)
        return False

    return result.get("result") in ("ok", "not found")


def extract_key_from_url(url: str) -> Optional[str]:
    """
    Recover the public id from a delivery URL issued by this account:
    <base>/<cloud>/image/upload/[v123/]<key>.<ext>
    """
    if not url or not settings.storage_configured:
        return None

    parsed = urlparse(url)
    base = urlparse(settings.CLOUDINARY_PUBLIC_BASE_URL)
    if parsed.netloc != base.netloc:
        return None

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) < 4 or parts[0] != settings.CLOUDINARY_CLOUD_NAME:
        return None
    if parts[1] != "image" or parts[2] != "upload":
        return None

    rest = parts[3:]
    if rest and _VERSION_SEGMENT.match(rest[0]):
        rest = rest[1:]
    if not rest:
        return None

    last = rest[-1]
    if "." in last:
        rest[-1] = last.rsplit(".", 1)[0]
    return "/".join(rest) or None


async def delete_images_by_url(urls: Iterable[str]) -> None:
    """Delete stored blobs behind image URLs, ignoring URLs we did not issue"""
    for url in urls:
        key = extract_key_from_url(url)
        if key is None:
            continue
        if not await delete_image(key):
            logger.warning(f"Could not delete stored image {key}")
