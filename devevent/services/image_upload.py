"""Banner image upload to the external image host.

``validate_image`` runs before anything leaves the process; the uploader
only ever sees payloads of an accepted type and size.
"""

import hashlib
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

import httpx
import structlog

from devevent.core.exceptions import InvalidImageError, UploadFailedError
from devevent.core.rest_api import HttpxRestClientPool
from devevent.core.validation import is_non_empty_string
from devevent.main_config import CloudinaryConfig, UploadConfig, get_upload_config

__all__ = ["CloudinaryImageUploader", "ImageUploader", "validate_image"]

logger = structlog.get_logger(__name__)

ClientProvider = Callable[[], Awaitable[httpx.AsyncClient]]


class ImageUploader(Protocol):
    """Anything that can turn image bytes into a public URL."""

    async def upload(
        self, data: bytes, *, filename: str, content_type: str, folder: str | None = None
    ) -> str: ...


def validate_image(content_type: str | None, size: int, config: UploadConfig | None = None) -> None:
    """Reject unsupported MIME types and oversized or empty payloads.

    Raises:
        InvalidImageError: If the image must not be uploaded
    """
    config = config or get_upload_config()

    if size <= 0:
        raise InvalidImageError("Image file is required.")
    if (content_type or "").lower() not in config.allowed_types_list:
        raise InvalidImageError(
            "Invalid file type. Only JPEG, PNG, WebP, and GIF images are allowed.",
            error=f"Rejected content type {content_type!r}",
        )
    if size > config.max_bytes:
        raise InvalidImageError(
            f"File size exceeds {config.max_bytes // (1024 * 1024)}MB limit.",
            error=f"{size} bytes > {config.max_bytes} bytes",
        )


class CloudinaryImageUploader:
    """Signed uploads to Cloudinary's REST upload endpoint."""

    def __init__(self, config: CloudinaryConfig, client_provider: ClientProvider | None = None) -> None:
        self.config = config
        self._client_provider = client_provider or HttpxRestClientPool.get_client

    def sign(self, params: dict[str, str]) -> str:
        """SHA-1 of the sorted ``key=value`` pairs followed by the API secret."""
        secret = self.config.api_secret.get_secret_value() if self.config.api_secret else ""
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{secret}".encode()).hexdigest()

    async def upload(
        self, data: bytes, *, filename: str, content_type: str, folder: str | None = None
    ) -> str:
        """Upload ``data`` and return its ``secure_url``.

        Raises:
            UploadFailedError: Missing credentials, transport or HTTP failure,
                or a response without a URL
        """
        if not (self.config.cloud_name and self.config.api_key and self.config.api_secret):
            raise UploadFailedError(error="Image host credentials are not configured")

        params = {"folder": folder or self.config.folder, "timestamp": str(int(time.time()))}
        fields = {**params, "api_key": self.config.api_key, "signature": self.sign(params)}

        client = await self._client_provider()
        try:
            response = await client.post(
                self.config.upload_url,
                data=fields,
                files={"file": (filename, data, content_type)},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise UploadFailedError(
                error=f"Image host answered {exc.response.status_code}: {exc.response.text[:200]}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise UploadFailedError(error=str(exc) or exc.__class__.__name__) from exc

        url = payload.get("secure_url") if isinstance(payload, dict) else None
        if not is_non_empty_string(url):
            raise UploadFailedError(error="Upload response has no secure_url")

        logger.info("image_uploaded", folder=params["folder"], size=len(data))
        return url
