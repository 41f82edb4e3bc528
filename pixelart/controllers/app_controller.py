"""Контроллер приложения: оркестрация запусков пикселизации.

SOLID:
- SRP: класс управляет запросами и доставкой результатов, без логики обработки.
- DIP: зависит от сервисов как от ролей; конкретные реализации подставляются.
Clean Code:
- Движок не хранит состояния; «побеждает последний запрос» реализовано здесь,
  через счётчик поколений. Поздний результат устаревшего запуска отбрасывается.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple

from PIL import Image

from pixelart.config import DEFAULT_BLOCK_SIZE, DISPLAY_SIZE
from pixelart.errors import PixelationError
from pixelart.models.pixelation_config import PixelationConfig
from pixelart.pixelate import pixelate_with_config
from pixelart.services.display_service import DisplayService
from pixelart.services.image_service import ImageService
from pixelart.services.process_service import ProcessService

logger = logging.getLogger(__name__)


@dataclass
class PixelArtController:
    """Связывает вызывающий код (UI, CLI) с движком.

    Ответственности:
    - Хранение текущих URL и неизменяемой конфигурации.
    - Запуск конвейера при каждом изменении и отбрасывание устаревших результатов.
    - Доставка результата в `on_result`, ошибки последнего запуска — в `on_error`.
    """
    image_service: ImageService = field(default_factory=ImageService)
    process_service: ProcessService = field(default_factory=ProcessService)
    display_service: DisplayService = field(default_factory=DisplayService)

    on_result: Optional[Callable[[Image.Image], None]] = None
    on_error: Optional[Callable[[PixelationError], None]] = None

    _config: PixelationConfig = field(default_factory=lambda: PixelationConfig(DEFAULT_BLOCK_SIZE))
    _image_url: Optional[str] = None
    _generation: int = 0
    _latest: Optional[Image.Image] = None

    @property
    def config(self) -> PixelationConfig:
        return self._config

    @property
    def image_url(self) -> Optional[str]:
        return self._image_url

    @property
    def latest(self) -> Optional[Image.Image]:
        """Последний доставленный результат (None, пока ничего не готово)."""
        return self._latest

    @property
    def generation(self) -> int:
        return self._generation

    # ---- Changes ----
    async def set_config(self, **changes: Any) -> Optional[Image.Image]:
        """Заменяет конфигурацию целиком новой и перезапускает конвейер."""
        self._config = self._config.replace(**changes)
        return await self.request()

    async def set_image_url(self, image_url: Optional[str]) -> Optional[Image.Image]:
        self._image_url = image_url
        return await self.request()

    # ---- Runs ----
    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def request(self) -> Optional[Image.Image]:
        """Запускает конвейер для текущих URL и конфигурации.

        Returns:
            Готовую поверхность, если к моменту завершения этот запрос всё ещё
            последний; иначе (или если URL не задан) — None.
        """
        self._generation += 1
        generation = self._generation
        image_url, cfg = self._image_url, self._config
        if image_url is None:
            self._latest = None
            return None

        try:
            surface = await pixelate_with_config(
                image_url, cfg, image_service=self.image_service, process_service=self.process_service
            )
        except PixelationError as exc:
            if not self.is_current(generation):
                logger.debug("Dropping error of stale run #%d: %s", generation, exc)
                return None
            logger.warning("Pixelation failed for %s: %s", image_url, exc)
            if self.on_error is None:
                raise
            self.on_error(exc)
            return None

        if not self.is_current(generation):
            logger.debug("Dropping stale result #%d (latest is #%d)", generation, self._generation)
            return None

        self._latest = surface
        if self.on_result is not None:
            self.on_result(surface)
        return surface

    # ---- Caller-side helpers ----
    def display_image(self, size: Tuple[int, int] = DISPLAY_SIZE) -> Image.Image:
        """Последний результат, вписанный в холст показа, или заглушка."""
        if self._latest is None:
            return self.display_service.placeholder(size)
        return self.display_service.fit_to_display(self._latest, size)

    def download_filename(self, artist: Optional[str] = None, album: Optional[str] = None) -> str:
        return self.display_service.download_filename(artist, album, self._config.block_size)
