"""
Image hosting through Cloudinary.

Message images are uploaded in batches of ``IMAGE_UPLOAD_BATCH_SIZE`` with one
``ThreadPoolExecutor`` per batch, which caps the number of uploads in flight.
A failed image is logged and skipped; the call only fails when every
attempted upload failed. Nothing is retried.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

import cloudinary
import cloudinary.uploader

from socketspeak.database.config.config import settings
from socketspeak.database.core import errors

log = logging.getLogger(__name__)

cloudinary.config(
    cloud_name=settings.CLOUDINARY_CLOUD_NAME,
    api_key=settings.CLOUDINARY_API_KEY,
    api_secret=settings.CLOUDINARY_API_SECRET,
    secure=True,
)

UPLOAD_FAILED_MESSAGE = "Failed to upload images. Please try again."


def upload_image(image: str, folder: str) -> str:
    """Upload one image (data-URL or remote URL) and return its hosted https URL."""
    response = cloudinary.uploader.upload(
        image,
        timeout=settings.IMAGE_UPLOAD_TIMEOUT,
        resource_type="auto",
        quality="auto",
        fetch_format="auto",
        eager=[{"width": 1200, "height": 1200, "crop": "limit"}],
        folder=folder,
    )
    return response["secure_url"]


def batched(items: list, size: int) -> list[list]:
    size = max(1, size)
    return [items[i:i + size] for i in range(0, len(items), size)]


def upload_images(images: list[str], folder: str, batch_size: int | None = None) -> list[str]:
    """
    Upload `images` with bounded parallelism.

    Args:
        images: Data-URLs (or URLs) in the order the client sent them.
        folder: Cloudinary folder, e.g. ``socketspeak/<sender id>``.
        batch_size: Uploads in flight at once. Defaults to the configured width.

    Returns:
        list[str]: Hosted URLs of the successful uploads, in input order.

    Raises:
        errors.UpstreamFailure: Images were attempted and none succeeded.
    """
    if not images:
        return []
    batch_size = batch_size or settings.IMAGE_UPLOAD_BATCH_SIZE

    uploaded: dict[int, str] = {}
    offset = 0
    for batch in batched(list(images), batch_size):
        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            futures = {executor.submit(upload_image, image, folder): offset + i for i, image in enumerate(batch)}
            for future in as_completed(futures):
                position = futures[future]
                try:
                    uploaded[position] = future.result()
                except Exception:
                    log.warning("Image %d upload to %s failed", position, folder, exc_info=True)
        offset += len(batch)

    if not uploaded:
        raise errors.UpstreamFailure(UPLOAD_FAILED_MESSAGE)
    if len(uploaded) < len(images):
        log.info("Uploaded %d of %d images to %s", len(uploaded), len(images), folder)
    return [uploaded[position] for position in sorted(uploaded)]


def upload_profile_picture(image: str, user_id) -> str:
    try:
        return upload_image(image, folder=f"socketspeak/profiles/{user_id}")
    except Exception as exc:
        log.warning("Profile picture upload for %s failed", user_id, exc_info=True)
        raise errors.UpstreamFailure("Failed to upload profile picture. Please try again.") from exc
