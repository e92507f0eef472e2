"""
Test the Uploadcare client and image URL helpers.
"""
import httpx
import pytest

from devevent.core.errors import UploadError
from devevent.services.uploads import UploadcareClient, build_image_url


def make_client(handler) -> UploadcareClient:
    return UploadcareClient(
        public_key="demopublickey",
        subdomain="1vfjjjrc00",
        upload_url="https://upload.uploadcare.com/base/",
        transport=httpx.MockTransport(handler),
    )


class TestUploadcareClient:
    """Test uploads against a mocked Uploadcare API."""

    def test_upload_returns_preview_url(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"file": "17be4678-dab7-4bc7-8753-28914a22960a"})

        url = make_client(handler).upload(b"GIF89a", "banner.gif", "image/gif")

        assert url == (
            "https://1vfjjjrc00.ucarecd.net/17be4678-dab7-4bc7-8753-28914a22960a"
            "/-/preview/1000x562/"
        )
        body = requests[0].content
        assert requests[0].method == "POST"
        assert b"demopublickey" in body
        assert b'name="UPLOADCARE_STORE"' in body
        assert b'filename="banner.gif"' in body

    def test_upload_http_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"detail": "pub_key is invalid"})

        with pytest.raises(UploadError, match="Image upload failed"):
            make_client(handler).upload(b"GIF89a", "banner.gif")

    def test_upload_without_file_id(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={})

        with pytest.raises(UploadError, match="no file id"):
            make_client(handler).upload(b"GIF89a", "banner.gif")

    def test_upload_requires_configuration(self):
        client = UploadcareClient(public_key="", subdomain="")

        with pytest.raises(UploadError, match="must be configured"):
            client.upload(b"GIF89a", "banner.gif")


class TestImageUrls:
    def test_build_image_url(self):
        assert build_image_url("demo", "abc") == "https://demo.ucarecd.net/abc/-/preview/1000x562/"
