from __future__ import annotations

from typing import Tuple

import pytest
from PIL import Image

from pixelart.errors import LoadError
from pixelart.models.image_model import ImageData
from pixelart.services.image_service import ImageService
from pixelart.services.process_service import ProcessService
from pixelart.services.render_service import RenderService

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
CLEAR = (0, 0, 0, 0)


def solid(size: Tuple[int, int], rgba=RED) -> Image.Image:
    return Image.new("RGBA", size, rgba)


class StaticImageService(ImageService):
    """Отдаёт заранее подготовленные изображения по ключу, без сети и диска."""

    def __init__(self, images=None) -> None:
        super().__init__()
        self.images = dict(images or {})
        self.calls = []

    def load_image(self, url) -> ImageData:
        self.calls.append(url)
        if url not in self.images:
            raise LoadError(f"no image for {url}")
        return self.from_image(self.images[url], str(url))


@pytest.fixture
def process_service() -> ProcessService:
    return ProcessService()


@pytest.fixture
def render_service() -> RenderService:
    return RenderService()
