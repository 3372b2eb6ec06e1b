"""API tests for the image upload gateway."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from evently.domain.errors import MissingAttachment, PayloadTooLarge, UnsupportedMediaType
from evently.domain.models import UploadResult
from evently.main import app, get_image_host
from evently.services.uploads import ImageHost, check_upload

MIB = 1024 * 1024
HOSTED_URL = "https://res.cloudinary.com/demo/image/upload/events/evt123.jpg"
THUMB_URL = "https://res.cloudinary.com/demo/image/upload/c_fill,h_300,w_400/events/evt123"


class FakeImageHost(ImageHost):
    """Records uploads instead of talking to Cloudinary."""

    def __init__(self, secure_url: str = HOSTED_URL, fail: bool = False):
        self.secure_url = secure_url
        self.fail = fail
        self.calls: list[tuple[str, int]] = []

    def upload(self, content: bytes, filename: str) -> UploadResult:
        self.calls.append((filename, len(content)))
        if self.fail:
            raise RuntimeError("cloudinary is down")
        return UploadResult(
            secure_url=self.secure_url,
            public_id="events/evt123",
            variants={
                "400x300": THUMB_URL,
            },
        )


@pytest.fixture()
def host():
    fake = FakeImageHost()
    app.dependency_overrides[get_image_host] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


@pytest.fixture()
def client():
    return TestClient(app)


def _post(client: TestClient, content: bytes, content_type="image/jpeg", name="photo.jpg"):
    return client.post("/api/upload", files={"file": (name, content, content_type)})


def test_upload_returns_hosted_urls(client, host):
    resp = _post(client, b"\xff\xd8" + b"0" * 1024)

    assert resp.status_code == 200
    body = resp.json()
    assert body["secure_url"] == host.secure_url
    assert body["variants"]["400x300"].startswith("https://res.cloudinary.com/")
    assert host.calls == [("photo.jpg", 1026)]


def test_missing_file_rejected(client, host):
    resp = client.post("/api/upload", data={"other": "value"})

    assert resp.status_code == 400
    assert resp.json()["error"] == "No file provided"
    assert host.calls == []


def test_text_file_field_counts_as_missing(client, host):
    resp = client.post("/api/upload", data={"file": "notafile"})

    assert resp.status_code == 400
    assert resp.json() == {"error": "No file provided", "code": "MISSING_ATTACHMENT"}
    assert host.calls == []


def test_oversized_body_read_only_past_the_cap(client, host, monkeypatch):
    import evently.main

    seen: list[int] = []
    real_upload_image = evently.main.upload_image

    def recording_upload_image(image_host, filename, content_type, content):
        seen.append(len(content))
        return real_upload_image(image_host, filename, content_type, content)

    monkeypatch.setattr(evently.main, "upload_image", recording_upload_image)
    resp = _post(client, b"0" * (6 * MIB))

    assert resp.status_code == 400
    assert resp.json()["error"] == "File size too large"
    assert seen == [4 * MIB + 1]
    assert host.calls == []


def test_oversized_file_rejected(client, host):
    resp = _post(client, b"0" * (4 * MIB + 1))

    assert resp.status_code == 400
    assert resp.json()["error"] == "File size too large"
    assert host.calls == []


def test_oversized_file_rejected_every_time(client, host):
    content = b"0" * (5 * MIB)
    statuses = [_post(client, content).status_code for _ in range(2)]

    assert statuses == [400, 400]
    assert host.calls == []


def test_exactly_four_mib_is_accepted(client, host):
    resp = _post(client, b"0" * (4 * MIB))
    assert resp.status_code == 200


@pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "video/mp4"])
def test_non_image_rejected_before_host(client, host, content_type):
    resp = _post(client, b"%PDF-1.4", content_type=content_type, name="doc.bin")

    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid file type"
    assert host.calls == []


def test_host_failure_is_500(client, host):
    host.fail = True
    resp = _post(client, b"png-bytes", content_type="image/png", name="a.png")

    assert resp.status_code == 500
    assert resp.json()["error"] == "Upload failed"


def test_disallowed_host_url_is_500(client, host):
    host.secure_url = "http://example.com/evt123.jpg"
    resp = _post(client, b"png-bytes", content_type="image/png", name="a.png")

    assert resp.status_code == 500
    assert resp.json()["code"] == "UPSTREAM_UPLOAD_FAILED"


def test_check_upload_order():
    with pytest.raises(MissingAttachment):
        check_upload(None, "image/png", 10)
    with pytest.raises(PayloadTooLarge):
        check_upload("big.txt", "text/plain", 5 * MIB)
    with pytest.raises(UnsupportedMediaType):
        check_upload("notes.txt", "text/plain", 10)
    check_upload("ok.webp", "image/webp", 10)
