# -*- coding: utf-8 -*-
# services/asset_service.py
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import aiofiles

logger = logging.getLogger(__name__)

AssetId = Union[int, str]


class InMemoryAssetProvider:
    """Ассеты из словаря id -> байты"""

    def __init__(self, assets: Optional[Dict[AssetId, bytes]] = None):
        self._assets: Dict[str, bytes] = {}
        for asset_id, data in (assets or {}).items():
            self.put(asset_id, data)

    def put(self, asset_id: AssetId, data: bytes):
        self._assets[str(asset_id)] = data

    async def get_asset(self, asset_id: AssetId) -> Optional[bytes]:
        return self._assets.get(str(asset_id))


class DirectoryAssetProvider:
    """Ассеты из директории: файл называется по id ассета (расширение любое)"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _find(self, asset_id: AssetId) -> Optional[Path]:
        name = str(asset_id)
        exact = self.directory / name
        if exact.is_file():
            return exact
        matches = sorted(self.directory.glob(f"{name}.*"))
        return matches[0] if matches else None

    async def get_asset(self, asset_id: AssetId) -> Optional[bytes]:
        if not self.directory.is_dir():
            logger.warning(f"Директория ассетов не найдена: {self.directory}")
            return None

        path = self._find(asset_id)
        if path is None:
            logger.debug(f"Ассет {asset_id} отсутствует в {self.directory}")
            return None

        async with aiofiles.open(path, 'rb') as f:
            return await f.read()
