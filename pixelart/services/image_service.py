"""Получение источника: URL/путь -> декодированное RGBA-изображение.

Принципы:
- SRP: класс отвечает только за загрузку и базовое извлечение свойств.
- OCP: новые источники добавляются отдельными методами `_read_*`.
- Любая ошибка получения или декодирования превращается в `LoadError`;
  повторов здесь нет, решение принимает вызывающий код.
"""
from __future__ import annotations

import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes, urlparse
from urllib.request import url2pathname

import requests
from PIL import Image, UnidentifiedImageError

from pixelart import config
from pixelart.errors import LoadError
from pixelart.models.image_model import ImageData

logger = logging.getLogger(__name__)


class ImageService:
    def __init__(self, session: Optional[requests.Session] = None, timeout: float = config.LOAD_TIMEOUT) -> None:
        self._session = session
        self._timeout = timeout

    def load_image(self, url: str | Path) -> ImageData:
        """Загружает изображение по URL или пути и возвращает его вместе с метаданными.

        Args:
            url: `http(s)://`-адрес, `file://`-URL, `data:`-URI или путь к файлу.

        Returns:
            `ImageData` c `PIL.Image.Image` в режиме RGBA и натуральными размерами.

        Raises:
            LoadError: сеть недоступна, ответ неуспешный, файл не найден
                или данные не распознаны как изображение.
        """
        source = str(url)
        scheme = urlparse(source).scheme.lower()
        if scheme in ("http", "https"):
            data = self._read_http(source)
        elif scheme == "data":
            data = self._read_data_uri(source)
        elif scheme == "file":
            data = self._read_file(Path(url2pathname(urlparse(source).path)))
        else:
            data = self._read_file(Path(source))
        image = self.decode_bytes(data, source)
        logger.info("Loaded %s: %dx%d (%s)", _short(source), image.width, image.height, image.mode)
        return image

    def decode_bytes(self, data: bytes, source: str = "<bytes>") -> ImageData:
        """Декодирует закодированные байты (PNG, JPEG, ...) в `ImageData`."""
        try:
            with Image.open(BytesIO(data)) as img:
                img.load()
                mode = img.mode
                pil_image = img.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise LoadError(f"Не удалось распознать изображение: {_short(source)}") from exc
        except (OSError, SyntaxError, ValueError) as exc:
            raise LoadError(f"Не удалось декодировать изображение: {_short(source)}") from exc

        width, height = pil_image.size
        return ImageData(
            source=source,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=mode,
            size_bytes=len(data),
        )

    def from_image(self, image: Image.Image, source: str = "<memory>") -> ImageData:
        """Оборачивает уже декодированное изображение (без копирования данных источника)."""
        pil_image = image if image.mode == "RGBA" else image.convert("RGBA")
        width, height = pil_image.size
        return ImageData(
            source=source,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=image.mode,
            size_bytes=None,
        )

    # ---- Sources ----
    def _read_http(self, url: str) -> bytes:
        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, timeout=self._timeout, headers={"User-Agent": config.USER_AGENT})
            response.raise_for_status()
        except requests.RequestException as exc:
            raise LoadError(f"Не удалось загрузить {url}: {exc}") from exc
        return response.content

    def _read_data_uri(self, uri: str) -> bytes:
        header, sep, payload = uri.partition(",")
        if not sep:
            raise LoadError("Некорректный data-URI: нет данных")
        try:
            if header.endswith(";base64"):
                return base64.b64decode(payload, validate=True)
            return unquote_to_bytes(payload)
        except (binascii.Error, ValueError) as exc:
            raise LoadError("Некорректный data-URI: ошибка base64") from exc

    def _read_file(self, path: Path) -> bytes:
        if not path.exists() or not path.is_file():
            raise LoadError(f"Файл не найден: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise LoadError(f"Не удалось прочитать файл: {path}") from exc


def _short(source: str, limit: int = 80) -> str:
    """Укорачивает длинные источники (data-URI) для сообщений и логов."""
    return source if len(source) <= limit else source[: limit - 3] + "..."
