"""
Загрузка и декодирование изображений для элементов страницы
"""
import asyncio
import base64
import binascii
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import aiofiles
import requests
from PIL import Image, UnidentifiedImageError

from ..core.exceptions import AssetLoadFailedError, AssetNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def decode_image(data: Union[bytes, bytearray], source: str) -> Image.Image:
    """Декодирование байтов в RGBA изображение с полной загрузкой пикселей"""
    if not data:
        raise AssetLoadFailedError(source, "пустые данные")
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            return img.convert('RGBA')
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise AssetLoadFailedError(source, str(e)) from e


def _decode_data_url(src: str) -> bytes:
    header, _, payload = src.partition(',')
    if not payload:
        raise AssetLoadFailedError(src[:40], "пустой data URL")
    try:
        if header.endswith(';base64'):
            return base64.b64decode(payload, validate=False)
        return payload.encode('latin-1')
    except (binascii.Error, UnicodeEncodeError) as e:
        raise AssetLoadFailedError(src[:40], str(e)) from e


def _download(url: str, timeout: int) -> bytes:
    try:
        response = requests.get(url, headers={'User-Agent': 'Mozilla/5.0'}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise AssetLoadFailedError(url, str(e)) from e
    return response.content


async def _read_file(path: str) -> bytes:
    if path.startswith('file://'):
        path = path[len('file://'):]
    if not Path(path).is_file():
        raise AssetLoadFailedError(path, "файл не найден")
    async with aiofiles.open(path, 'rb') as f:
        return await f.read()


async def load_image_source(src: str, timeout: int = DEFAULT_TIMEOUT) -> Image.Image:
    """Изображение по строке источника: data URL, http(s) адрес или путь к файлу"""
    if not src:
        raise AssetLoadFailedError("<пусто>", "не задан источник изображения")

    if src.startswith('data:'):
        data = _decode_data_url(src)
        label = src[:40]
    elif src.startswith(('http://', 'https://')):
        logger.debug(f"Загрузка изображения по сети: {src}")
        data = await asyncio.to_thread(_download, src, timeout)
        label = src
    else:
        data = await _read_file(src)
        label = src

    return decode_image(data, label)


def _asset_bytes(asset) -> Optional[bytes]:
    if asset is None:
        return None
    if isinstance(asset, (bytes, bytearray)):
        return bytes(asset)
    if hasattr(asset, 'read'):
        return asset.read()
    raise TypeError(f"Поставщик ассетов вернул неподдерживаемый тип: {type(asset).__name__}")


async def load_asset_image(asset_id, asset_provider) -> Image.Image:
    """Изображение из хранилища ассетов; отсутствие ассета -> AssetNotFoundError"""
    asset = await asset_provider.get_asset(asset_id)
    data = _asset_bytes(asset)
    if data is None:
        raise AssetNotFoundError(asset_id)
    return decode_image(data, f"asset:{asset_id}")
