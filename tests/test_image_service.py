import base64
from io import BytesIO

import pytest
import requests
from PIL import Image

from pixelart.errors import LoadError
from pixelart.services.image_service import ImageService


def _png_bytes(mode="RGB", size=(8, 6), color=(10, 20, 30)):
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class _FakeResponse:
    def __init__(self, content=b"", status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


def test_load_from_path(tmp_path):
    path = tmp_path / "cover.png"
    path.write_bytes(_png_bytes())

    data = ImageService().load_image(path)

    assert (data.width, data.height) == (8, 6)
    assert data.mode == "RGB"
    assert data.pil_image.mode == "RGBA"
    assert data.pil_image.getpixel((0, 0)) == (10, 20, 30, 255)
    assert data.size_bytes == path.stat().st_size


def test_load_from_file_url(tmp_path):
    path = tmp_path / "cover.png"
    path.write_bytes(_png_bytes())
    data = ImageService().load_image(path.as_uri())
    assert data.source == path.as_uri()
    assert data.pil_image.size == (8, 6)


def test_load_from_data_uri():
    uri = "data:image/png;base64," + base64.b64encode(_png_bytes("RGBA", (3, 3), (1, 2, 3, 4))).decode()
    data = ImageService().load_image(uri)
    assert data.pil_image.getpixel((1, 1)) == (1, 2, 3, 4)


def test_missing_file_is_a_load_error(tmp_path):
    with pytest.raises(LoadError):
        ImageService().load_image(tmp_path / "nope.png")


def test_garbage_bytes_are_a_load_error():
    with pytest.raises(LoadError):
        ImageService().decode_bytes(b"definitely not an image")


@pytest.mark.parametrize("uri", ["data:image/png;base64", "data:image/png;base64,@@@"])
def test_malformed_data_uri_is_a_load_error(uri):
    with pytest.raises(LoadError):
        ImageService().load_image(uri)


def test_load_over_http(monkeypatch):
    calls = []

    def fake_get(url, timeout, headers):
        calls.append((url, timeout))
        return _FakeResponse(_png_bytes())

    monkeypatch.setattr(requests, "get", fake_get)
    data = ImageService(timeout=3).load_image("https://i.scdn.co/image/abc")

    assert calls == [("https://i.scdn.co/image/abc", 3)]
    assert data.pil_image.size == (8, 6)


def test_http_status_error_is_a_load_error(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, timeout, headers: _FakeResponse(status=403))
    with pytest.raises(LoadError) as info:
        ImageService().load_image("https://example.com/cover.jpg")
    assert isinstance(info.value.__cause__, requests.HTTPError)


def test_network_failure_is_a_load_error(monkeypatch):
    def fail(url, timeout, headers):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(requests, "get", fail)
    with pytest.raises(LoadError):
        ImageService().load_image("http://example.com/cover.jpg")


def test_session_is_used_when_given():
    class Session:
        def __init__(self):
            self.urls = []

        def get(self, url, timeout, headers):
            self.urls.append(url)
            return _FakeResponse(_png_bytes())

    session = Session()
    ImageService(session=session).load_image("http://example.com/a.png")
    assert session.urls == ["http://example.com/a.png"]


def test_from_image_converts_to_rgba():
    data = ImageService().from_image(Image.new("L", (4, 2), 128))
    assert data.mode == "L"
    assert data.pil_image.mode == "RGBA"
    assert data.size_bytes is None
