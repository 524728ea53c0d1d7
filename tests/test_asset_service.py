# tests/test_asset_service.py
import tempfile
import unittest
from unittest.mock import MagicMock, patch
import sys
import os
from io import BytesIO
from pathlib import Path

import requests
from PIL import Image

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from fixtures import data_url, png_bytes
from zinepress.core.exceptions import AssetLoadFailedError, AssetNotFoundError
from zinepress.processing.image_loader import (
    decode_image, load_asset_image, load_image_source
)
from zinepress.services.asset_service import DirectoryAssetProvider, InMemoryAssetProvider


class TestAssetProviders(unittest.IsolatedAsyncioTestCase):

    async def test_in_memory_ids_are_strings(self):
        """Числовой и строковый id указывают на один ассет"""
        provider = InMemoryAssetProvider({7: b'seven'})
        self.assertEqual(await provider.get_asset('7'), b'seven')
        self.assertEqual(await provider.get_asset(7), b'seven')
        self.assertIsNone(await provider.get_asset(8))

    async def test_directory_provider(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, '12.png').write_bytes(png_bytes())
            Path(tmp, 'cover').write_bytes(b'raw')
            provider = DirectoryAssetProvider(tmp)

            self.assertEqual(await provider.get_asset(12), png_bytes())
            self.assertEqual(await provider.get_asset('cover'), b'raw')
            self.assertIsNone(await provider.get_asset(13))

    async def test_missing_directory(self):
        provider = DirectoryAssetProvider('/nonexistent/zine-assets')
        self.assertIsNone(await provider.get_asset(1))


class TestImageLoader(unittest.IsolatedAsyncioTestCase):

    def test_decode_image(self):
        image = decode_image(png_bytes(size=(5, 3)), 'test')
        self.assertEqual(image.mode, 'RGBA')
        self.assertEqual(image.size, (5, 3))

    def test_decode_failures(self):
        with self.assertRaises(AssetLoadFailedError):
            decode_image(b'', 'empty')
        with self.assertRaises(AssetLoadFailedError):
            decode_image(b'<svg/>', 'svg')

    def test_decompression_bomb_rejected(self):
        """Слишком большое изображение - ошибка загрузки ассета, а не исключение Pillow"""
        with patch.object(Image, 'MAX_IMAGE_PIXELS', 100):
            with self.assertRaises(AssetLoadFailedError):
                decode_image(png_bytes(size=(40, 40)), 'big')

    async def test_data_url(self):
        image = await load_image_source(data_url(color='blue'))
        self.assertEqual(image.getpixel((0, 0)), (0, 0, 255, 255))

    async def test_file_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp, 'photo.png')
            path.write_bytes(png_bytes(color='lime'))

            image = await load_image_source(str(path))
            self.assertEqual(image.getpixel((0, 0))[:3], (0, 255, 0))
            image = await load_image_source(f"file://{path}")
            self.assertEqual(image.size, (40, 40))

    async def test_missing_file(self):
        with self.assertRaises(AssetLoadFailedError):
            await load_image_source('/nonexistent/photo.png')

    async def test_empty_source(self):
        with self.assertRaises(AssetLoadFailedError):
            await load_image_source('')

    @patch('zinepress.processing.image_loader.requests.get')
    async def test_http_source(self, mock_get):
        """Загрузка по http через requests с таймаутом"""
        response = MagicMock()
        response.content = png_bytes(color='red')
        mock_get.return_value = response

        image = await load_image_source('https://example.com/photo.png', timeout=5)

        self.assertEqual(image.getpixel((0, 0))[:3], (255, 0, 0))
        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], 'https://example.com/photo.png')
        self.assertEqual(kwargs['timeout'], 5)

    @patch('zinepress.processing.image_loader.requests.get')
    async def test_http_failure(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('offline')
        with self.assertRaises(AssetLoadFailedError) as ctx:
            await load_image_source('http://example.com/missing.png')
        self.assertIn('offline', str(ctx.exception))

    async def test_asset_image(self):
        provider = InMemoryAssetProvider({'a1': png_bytes(color='yellow')})
        image = await load_asset_image('a1', provider)
        self.assertEqual(image.getpixel((0, 0))[:3], (255, 255, 0))

    async def test_asset_not_found(self):
        with self.assertRaises(AssetNotFoundError) as ctx:
            await load_asset_image('missing', InMemoryAssetProvider())
        self.assertEqual(ctx.exception.asset_id, 'missing')

    async def test_asset_provider_may_return_file_object(self):
        class StreamProvider:
            async def get_asset(self, asset_id):
                return BytesIO(png_bytes())

        image = await load_asset_image(1, StreamProvider())
        self.assertEqual(image.size, (40, 40))


if __name__ == '__main__':
    unittest.main()
