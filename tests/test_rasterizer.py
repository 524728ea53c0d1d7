# tests/test_rasterizer.py
import unittest
from unittest.mock import AsyncMock, patch
import sys
import os

from PIL import Image

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from fixtures import fast_config
from zinepress.core.config import RenderConfig
from zinepress.core.rasterizer import FontResolver, PillowBackend, SheetRasterizer
from zinepress.core.scene import GroupNode, ImageNode, LineNode, Node, RectNode, TextNode

RED = (255, 0, 0)
WHITE = (255, 255, 255)


def _scene(*children, width=100, height=50) -> GroupNode:
    return GroupNode(0, 0, width, height, children=list(children))


def _quadrant_group(rotation=0, mirrored=False) -> GroupNode:
    """Квадрат 100x100 с красной левой верхней четвертью"""
    return GroupNode(0, 0, 100, 100,
                     children=[RectNode(0, 0, 50, 50, fill='red')],
                     rotation=rotation, mirrored=mirrored, pivot=(50, 50))


class TestSheetRasterizer(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.rasterizer = SheetRasterizer(config=fast_config())

    async def test_output_size_follows_pixel_ratio(self):
        """Размер растра = размер листа x pixel_ratio"""
        image = await self.rasterizer.rasterize(_scene(), 100, 50, pixel_ratio=1.5)
        self.assertEqual(image.size, (150, 75))
        self.assertEqual(image.mode, 'RGB')

    async def test_rect_is_scaled(self):
        scene = _scene(RectNode(10, 10, 20, 20, fill='red'))
        image = await self.rasterizer.rasterize(scene, 100, 50, pixel_ratio=2)
        self.assertEqual(image.getpixel((40, 40)), RED)
        self.assertEqual(image.getpixel((10, 10)), WHITE)
        self.assertEqual(image.getpixel((70, 70)), WHITE)

    async def test_rotation_180_about_center(self):
        """Поворот на 180 вокруг центра переносит левую половину вправо"""
        group = GroupNode(0, 0, 100, 50, children=[RectNode(0, 0, 50, 50, fill='red')],
                          rotation=180, pivot=(50, 25))
        image = await self.rasterizer.rasterize(_scene(group), 100, 50, pixel_ratio=1)
        self.assertEqual(image.getpixel((75, 25)), RED)
        self.assertEqual(image.getpixel((25, 25)), WHITE)

    async def test_mirror(self):
        group = GroupNode(0, 0, 100, 50, children=[RectNode(0, 0, 50, 50, fill='red')],
                          mirrored=True, pivot=(50, 25))
        image = await self.rasterizer.rasterize(_scene(group), 100, 50, pixel_ratio=1)
        self.assertEqual(image.getpixel((75, 25)), RED)
        self.assertEqual(image.getpixel((25, 25)), WHITE)

    async def test_rotation_then_mirror(self):
        """Сначала поворот, потом отражение"""
        scene = _scene(_quadrant_group(rotation=90, mirrored=True), width=100, height=100)
        image = await self.rasterizer.rasterize(scene, 100, 100, pixel_ratio=1)
        # 90 по часовой: левый верх -> правый верх; отражение: -> левый верх
        self.assertEqual(image.getpixel((25, 25)), RED)
        self.assertEqual(image.getpixel((75, 75)), WHITE)
        self.assertEqual(image.getpixel((75, 25)), WHITE)

    async def test_rotation_90_clockwise(self):
        scene = _scene(_quadrant_group(rotation=90), width=100, height=100)
        image = await self.rasterizer.rasterize(scene, 100, 100, pixel_ratio=1)
        self.assertEqual(image.getpixel((75, 25)), RED)
        self.assertEqual(image.getpixel((25, 25)), WHITE)

    async def test_group_clips_children(self):
        """Содержимое за пределами закрепленной группы обрезается"""
        group = GroupNode(0, 0, 50, 50, children=[RectNode(0, 0, 100, 50, fill='red')])
        image = await self.rasterizer.rasterize(_scene(group), 100, 50, pixel_ratio=1)
        self.assertEqual(image.getpixel((25, 25)), RED)
        self.assertEqual(image.getpixel((75, 25)), WHITE)

    async def test_surface_cleared_between_sides(self):
        """Вторая сторона не содержит следов первой"""
        first = await self.rasterizer.rasterize(
            _scene(RectNode(0, 0, 100, 50, fill='red')), 100, 50, pixel_ratio=1)
        second = await self.rasterizer.rasterize(_scene(), 100, 50, pixel_ratio=1)

        self.assertEqual(first.getpixel((50, 25)), RED)
        self.assertEqual(second.getcolors(), [(100 * 50, WHITE)])

    async def test_dashed_line(self):
        line = LineNode((0, 5, 100, 5), stroke='black', stroke_width=4, dash=(6, 4))
        image = await self.rasterizer.rasterize(_scene(line), 100, 10, pixel_ratio=1)
        self.assertEqual(image.getpixel((2, 5)), (0, 0, 0))
        self.assertEqual(image.getpixel((8, 5)), WHITE)
        self.assertEqual(image.getpixel((12, 5)), (0, 0, 0))

    async def test_opacity(self):
        scene = _scene(RectNode(0, 0, 100, 50, fill='red', opacity=0.5))
        image = await self.rasterizer.rasterize(scene, 100, 50, pixel_ratio=1)
        r, g, b = image.getpixel((50, 25))
        self.assertEqual(r, 255)
        self.assertAlmostEqual(g, 128, delta=2)
        self.assertAlmostEqual(b, 128, delta=2)

    async def test_image_node_resized(self):
        tile = Image.new('RGBA', (10, 10), (0, 0, 255, 255))
        scene = _scene(ImageNode(20, 10, 30, 20, tile))
        image = await self.rasterizer.rasterize(scene, 100, 50, pixel_ratio=2)
        self.assertEqual(image.getpixel((60, 30)), (0, 0, 255))
        self.assertEqual(image.getpixel((30, 30)), WHITE)

    async def test_text_draws_glyphs(self):
        text = TextNode(0, 0, 100, 50, 'ZINE', font_size=30, color='black')
        image = await self.rasterizer.rasterize(_scene(text), 100, 50, pixel_ratio=1)
        self.assertGreater(len(image.getcolors(100 * 50)), 1)

    async def test_settle_delay_awaited(self):
        """После отрисовки растеризатор ждет settle_delay"""
        rasterizer = SheetRasterizer(config=RenderConfig(settle_delay=0.5))
        with patch('zinepress.core.rasterizer.asyncio.sleep', new=AsyncMock()) as sleep:
            await rasterizer.rasterize(_scene(), 10, 10, pixel_ratio=1)
        sleep.assert_awaited_once_with(0.5)


class TestPillowBackend(unittest.TestCase):

    def test_unknown_node_rejected(self):
        backend = PillowBackend()
        layer = backend.new_layer(10, 10)
        with self.assertRaises(TypeError):
            backend.draw(layer, Node(), 1)

    def test_font_fallback_is_cached(self):
        """Незнакомое семейство не ломает отрисовку"""
        fonts = FontResolver(['NoSuchFallbackFont'])
        font = fonts.get('Definitely Missing Font', 'bold', 'italic', 14)
        self.assertIsNotNone(font)
        self.assertIs(fonts.get('Definitely Missing Font', 'bold', 'italic', 14), font)


if __name__ == '__main__':
    unittest.main()
