"""Uploadcare client used to host event images."""

import logging

import httpx

from devevent.core import config
from devevent.core.errors import UploadError

logger = logging.getLogger(__name__)

UPLOADCARE_CDN_HOST = "ucarecd.net"


def build_image_url(subdomain: str, file_uuid: str) -> str:
    return f"https://{subdomain}.{UPLOADCARE_CDN_HOST}/{file_uuid}/-/preview/1000x562/"


class UploadcareClient:
    def __init__(
        self,
        public_key: str = config.UPLOADCARE_PUBLIC_KEY,
        subdomain: str = config.UPLOADCARE_SUBDOMAIN,
        upload_url: str = config.UPLOADCARE_UPLOAD_URL,
        timeout: float = config.UPLOADCARE_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.public_key = public_key
        self.subdomain = subdomain
        self.upload_url = upload_url
        self.timeout = timeout
        self._transport = transport

    def upload(self, data: bytes, filename: str, content_type: str | None = None) -> str:
        """Upload ``data`` and return the display URL of the stored file.

        Raises:
            UploadError: If the service is misconfigured, unreachable or
                returns no file id.
        """
        if not self.public_key or not self.subdomain:
            raise UploadError("Uploadcare public key and subdomain must be configured")

        files = {"file": (filename, data, content_type or "application/octet-stream")}
        form = {"UPLOADCARE_PUB_KEY": self.public_key, "UPLOADCARE_STORE": "auto"}

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.upload_url, data=form, files=files)
                response.raise_for_status()
                file_uuid = response.json().get("file")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Image upload failed for {filename}: {e}")
            raise UploadError(f"Image upload failed: {e}") from e

        if not file_uuid:
            raise UploadError("Image upload returned no file id")

        logger.info(f"Uploaded {filename} as {file_uuid}")
        return build_image_url(self.subdomain, file_uuid)


def get_image_uploader() -> UploadcareClient:
    return UploadcareClient()
