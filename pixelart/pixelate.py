"""Точка входа движка: URL + параметры -> готовая RGBA-поверхность."""
from __future__ import annotations

import asyncio
from typing import Optional, Union

from PIL import Image

from pixelart.models.pixelation_config import PixelationConfig, PixelShape
from pixelart.services.image_service import ImageService
from pixelart.services.process_service import ProcessService


async def pixelate(
    image_url: str,
    block_size: int,
    draw_borders: bool = False,
    pixel_shape: Union[str, PixelShape] = "square",
    align_pixels: bool = False,
    *,
    image_service: Optional[ImageService] = None,
    process_service: Optional[ProcessService] = None,
) -> Image.Image:
    """Загружает изображение и пикселизирует его.

    Параметры проверяются до загрузки, поэтому `InvalidConfig` не тратит
    сетевой запрос. Ожидание происходит только на этапе загрузки (в рабочем
    потоке); остальные этапы выполняются синхронно до конца.

    Raises:
        InvalidConfig: недопустимые параметры.
        LoadError: источник не получен или не декодирован.
        SurfaceError: не удалось создать поверхность.
    """
    cfg = PixelationConfig(
        block_size=block_size,
        draw_borders=draw_borders,
        pixel_shape=pixel_shape,
        align_pixels=align_pixels,
    )
    return await pixelate_with_config(image_url, cfg, image_service=image_service, process_service=process_service)


async def pixelate_with_config(
    image_url: str,
    cfg: PixelationConfig,
    *,
    image_service: Optional[ImageService] = None,
    process_service: Optional[ProcessService] = None,
) -> Image.Image:
    loader = image_service or ImageService()
    processor = process_service or ProcessService()
    image = await asyncio.to_thread(loader.load_image, image_url)
    return processor.pixelate_image(image, cfg)
