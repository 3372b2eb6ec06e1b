"""Service for validating image uploads and forwarding them to the image host."""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from urllib.parse import urlparse

import cloudinary
import cloudinary.uploader
from cloudinary import CloudinaryImage

from evently.config import Config
from evently.domain.errors import (
    MissingAttachment,
    PayloadTooLarge,
    UnsupportedMediaType,
    UpstreamUploadError,
)
from evently.domain.models import UploadResult

logger = logging.getLogger(__name__)


def check_upload(
    filename: str | None,
    content_type: str | None,
    size: int,
    max_bytes: int = Config.MAX_UPLOAD_BYTES,
) -> None:
    """Reject a file that is missing, too large, or not an image.

    Shared by the gateway and the uploader widget so both fail the same way.
    Checks run in that order and the first failure is raised.
    """
    if not filename:
        raise MissingAttachment()
    if size > max_bytes:
        raise PayloadTooLarge(size=size, limit=max_bytes)
    if not (content_type or "").startswith("image/"):
        raise UnsupportedMediaType(content_type)


def is_allowed_image_url(
    url: str, hosts: tuple[str, ...] = Config.ALLOWED_IMAGE_HOSTS
) -> bool:
    parsed = urlparse(url)
    return parsed.scheme == "https" and parsed.hostname in hosts


class ImageHost(ABC):
    """Interface for the external image-hosting provider."""

    @abstractmethod
    def upload(self, content: bytes, filename: str) -> UploadResult:
        """Store *content* and return its canonical URL set."""
        ...


class CloudinaryImageHost(ImageHost):
    """Stores images in a Cloudinary folder with fixed-size eager variants."""

    def __init__(
        self,
        folder: str = Config.UPLOAD_FOLDER,
        variants: tuple[tuple[int, int], ...] = Config.IMAGE_VARIANTS,
    ) -> None:
        cloudinary.config(
            cloud_name=Config.CLOUDINARY_CLOUD_NAME,
            api_key=Config.CLOUDINARY_API_KEY,
            api_secret=Config.CLOUDINARY_API_SECRET,
            secure=True,
        )
        self.folder = folder
        self.variants = variants

    def upload(self, content: bytes, filename: str) -> UploadResult:
        Config.validate()
        response = cloudinary.uploader.upload(
            io.BytesIO(content),
            resource_type="auto",
            folder=self.folder,
            quality="auto",
            fetch_format="auto",
            eager=[
                {"width": w, "height": h, "crop": "fill"} for w, h in self.variants
            ],
            eager_async=True,
        )
        public_id = response.get("public_id")
        variants = {}
        if public_id:
            for w, h in self.variants:
                variants[f"{w}x{h}"] = CloudinaryImage(public_id).build_url(
                    width=w, height=h, crop="fill", secure=True
                )
        return UploadResult(
            secure_url=response["secure_url"],
            public_id=public_id,
            width=response.get("width"),
            height=response.get("height"),
            format=response.get("format"),
            bytes=response.get("bytes"),
            variants=variants,
        )


def upload_image(
    host: ImageHost,
    filename: str | None,
    content_type: str | None,
    content: bytes,
) -> UploadResult:
    """Validate one image and store it with *host*.

    Raises the check's ``DomainError`` before touching the host, or
    ``UpstreamUploadError`` if the host fails or hands back a URL outside the
    allowed HTTPS hosts. Nothing is returned unless the full URL set is.
    """
    check_upload(filename, content_type, len(content))

    try:
        result = host.upload(content, filename)
    except Exception as exc:
        logger.exception("Error uploading %s to image host", filename)
        raise UpstreamUploadError() from exc

    urls = [result.secure_url, *result.variants.values()]
    if not all(is_allowed_image_url(u) for u in urls):
        logger.error("Image host returned a disallowed URL: %s", result.secure_url)
        raise UpstreamUploadError()

    logger.info("Uploaded %s (%d bytes) to %s", filename, len(content), result.secure_url)
    return result
