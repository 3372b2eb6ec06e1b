"""Application settings, read from the environment (and a local .env)."""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _hosts(raw: str) -> tuple[str, ...]:
    return tuple(h.strip() for h in raw.split(",") if h.strip())


class Config:
    # Cloudinary credentials
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME") or os.getenv(
        "NEXT_PUBLIC_CLOUDINARY_CLOUD_NAME"
    )
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")

    # Uploads
    MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(4 * 1024 * 1024)))
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "events")
    IMAGE_VARIANTS = ((400, 300), (800, 600))
    ALLOWED_IMAGE_HOSTS = _hosts(
        os.getenv("ALLOWED_IMAGE_HOSTS", "utfs.io,res.cloudinary.com")
    )

    # Listing and form behaviour
    EVENTS_PAGE_SIZE = int(os.getenv("EVENTS_PAGE_SIZE", "6"))
    REDIRECT_DELAY_SECONDS = float(os.getenv("REDIRECT_DELAY_SECONDS", "1.0"))

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls):
        """Check for critical configuration errors."""
        if not cls.CLOUDINARY_CLOUD_NAME:
            raise ValueError("CLOUDINARY_CLOUD_NAME not set in .env file.")
        if not cls.CLOUDINARY_API_KEY or not cls.CLOUDINARY_API_SECRET:
            raise ValueError("Cloudinary API credentials not set in .env file.")

    @classmethod
    def setup_logging(cls):
        """Configure console logging on the root logger."""
        logger = logging.getLogger()
        logger.setLevel(cls.LOG_LEVEL)

        # Avoid duplicate handlers when the app is re-imported (tests, reload)
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            logger.addHandler(handler)
