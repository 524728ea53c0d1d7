"""
Растеризация стороны листа в изображение
"""
import asyncio
import logging
import math
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont, ImageOps

from .config import RenderConfig
from .scene import (
    EllipseNode, GroupNode, ImageNode, LineNode, Node, PolygonNode, RectNode, TextNode
)
from ..utils.helpers import dash_segments, parse_color, rotate_point, spline_points

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

# Суффиксы файлов начертаний: (жирный, курсив) -> варианты
_STYLE_SUFFIXES = {
    (False, False): ['', '-Regular', ' Regular'],
    (True, False): ['-Bold', ' Bold', 'bd'],
    (False, True): ['-Italic', '-Oblique', ' Italic', 'i'],
    (True, True): ['-BoldItalic', '-BoldOblique', ' Bold Italic', 'bi'],
}


class FontResolver:
    def __init__(self, fallbacks: List[str]):
        self.fallbacks = fallbacks
        self._cache: Dict[tuple, ImageFont.ImageFont] = {}

    @staticmethod
    def _families(family: str) -> List[str]:
        first = (family or '').split(',')[0].strip().strip('"\'')
        if not first:
            return []
        names = [first, first.replace(' ', '')]
        return list(dict.fromkeys(names))

    def get(self, family: str, weight: str, style: str, size: float):
        bold = (weight or '').lower() == 'bold'
        italic = (style or '').lower() in ('italic', 'oblique')
        size_px = max(1, round(size))
        key = (family, bold, italic, size_px)
        if key in self._cache:
            return self._cache[key]

        font = None
        for name in self._families(family) + self.fallbacks:
            for suffix in _STYLE_SUFFIXES[(bold, italic)]:
                try:
                    font = ImageFont.truetype(f"{name}{suffix}.ttf", size_px)
                    break
                except OSError:
                    continue
            if font is not None:
                break

        if font is None:
            logger.debug(f"Шрифт {family!r} не найден, используется встроенный")
            font = ImageFont.load_default(size=size_px)

        self._cache[key] = font
        return font


class DrawingBackend:
    """
    Минимальный интерфейс рисования для растеризатора.

    Слой - поверхность бэкенда, scale - пиксели на пункт, origin - смещение
    локальной системы координат слоя в пунктах.
    """

    def new_layer(self, width_px: int, height_px: int):
        raise NotImplementedError

    def clear(self, layer, color: str):
        raise NotImplementedError

    def rect(self, layer, node: RectNode, scale: float, origin: Point):
        raise NotImplementedError

    def ellipse(self, layer, node: EllipseNode, scale: float, origin: Point):
        raise NotImplementedError

    def polygon(self, layer, node: PolygonNode, scale: float, origin: Point):
        raise NotImplementedError

    def polyline(self, layer, node: LineNode, scale: float, origin: Point):
        raise NotImplementedError

    def text(self, layer, node: TextNode, scale: float, origin: Point):
        raise NotImplementedError

    def image(self, layer, node: ImageNode, scale: float, origin: Point):
        raise NotImplementedError

    def group(self, layer, node: GroupNode, scale: float, origin: Point):
        raise NotImplementedError

    def snapshot(self, layer):
        raise NotImplementedError

    def draw(self, layer, node: Node, scale: float, origin: Point = (0.0, 0.0)):
        if isinstance(node, GroupNode):
            self.group(layer, node, scale, origin)
        elif isinstance(node, RectNode):
            self.rect(layer, node, scale, origin)
        elif isinstance(node, EllipseNode):
            self.ellipse(layer, node, scale, origin)
        elif isinstance(node, PolygonNode):
            self.polygon(layer, node, scale, origin)
        elif isinstance(node, LineNode):
            self.polyline(layer, node, scale, origin)
        elif isinstance(node, TextNode):
            self.text(layer, node, scale, origin)
        elif isinstance(node, ImageNode):
            self.image(layer, node, scale, origin)
        else:
            raise TypeError(f"Неизвестный узел сцены: {type(node).__name__}")


def _to_px(x: float, y: float, scale: float, origin: Point) -> Point:
    return (x + origin[0]) * scale, (y + origin[1]) * scale


def _apply_opacity(tile: Image.Image, opacity: float) -> Image.Image:
    if opacity is None or opacity >= 1:
        return tile
    opacity = max(0.0, opacity)
    alpha = tile.getchannel('A').point(lambda a: int(a * opacity))
    tile.putalpha(alpha)
    return tile


def composite_at(base: Image.Image, tile: Image.Image, x: int, y: int):
    """alpha_composite с обрезкой по границам основы (допускает отрицательные координаты)"""
    left = max(0, -x)
    top = max(0, -y)
    right = min(tile.width, base.width - x)
    bottom = min(tile.height, base.height - y)
    if right <= left or bottom <= top:
        return
    base.alpha_composite(tile, dest=(x + left, y + top), source=(left, top, right, bottom))


class PillowBackend(DrawingBackend):
    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self.fonts = FontResolver(self.config.fallback_fonts)

    def new_layer(self, width_px: int, height_px: int) -> Image.Image:
        return Image.new('RGBA', (max(1, width_px), max(1, height_px)), (0, 0, 0, 0))

    def clear(self, layer: Image.Image, color: str):
        layer.paste(parse_color(color) or (255, 255, 255, 255), (0, 0, layer.width, layer.height))

    def snapshot(self, layer: Image.Image) -> Image.Image:
        return layer.convert('RGB')

    def _leaf_layer(self, layer: Image.Image):
        scratch = self.new_layer(layer.width, layer.height)
        return scratch, ImageDraw.Draw(scratch)

    def _commit(self, layer: Image.Image, scratch: Image.Image, opacity: float):
        layer.alpha_composite(_apply_opacity(scratch, opacity))

    def rect(self, layer, node: RectNode, scale: float, origin: Point):
        scratch, draw = self._leaf_layer(layer)
        x0, y0 = _to_px(node.x, node.y, scale, origin)
        x1, y1 = _to_px(node.x + node.width, node.y + node.height, scale, origin)
        radius = node.corner_radius * scale

        fill = parse_color(node.fill)
        if fill:
            if radius > 0:
                draw.rounded_rectangle((x0, y0, x1, y1), radius=radius, fill=fill)
            else:
                draw.rectangle((x0, y0, x1, y1), fill=fill)

        stroke = parse_color(node.stroke)
        if stroke and node.stroke_width > 0:
            # Обводка центрирована по контуру
            half = node.stroke_width * scale / 2
            width = max(1, round(node.stroke_width * scale))
            box = (x0 - half, y0 - half, x1 + half, y1 + half)
            if radius > 0:
                draw.rounded_rectangle(box, radius=radius + half, outline=stroke, width=width)
            else:
                draw.rectangle(box, outline=stroke, width=width)
        self._commit(layer, scratch, node.opacity)

    def ellipse(self, layer, node: EllipseNode, scale: float, origin: Point):
        scratch, draw = self._leaf_layer(layer)
        cx, cy = _to_px(node.cx, node.cy, scale, origin)
        r = node.radius * scale

        fill = parse_color(node.fill)
        if fill:
            draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=fill)
        stroke = parse_color(node.stroke)
        if stroke and node.stroke_width > 0:
            half = node.stroke_width * scale / 2
            draw.ellipse((cx - r - half, cy - r - half, cx + r + half, cy + r + half),
                         outline=stroke, width=max(1, round(node.stroke_width * scale)))
        self._commit(layer, scratch, node.opacity)

    def polygon(self, layer, node: PolygonNode, scale: float, origin: Point):
        scratch, draw = self._leaf_layer(layer)
        points = [_to_px(x, y, scale, origin) for x, y in node.points]
        fill = parse_color(node.fill)
        if fill:
            draw.polygon(points, fill=fill)
        stroke = parse_color(node.stroke)
        if stroke and node.stroke_width > 0:
            draw.line(points + points[:1], fill=stroke,
                      width=max(1, round(node.stroke_width * scale)), joint='curve')
        self._commit(layer, scratch, node.opacity)

    @staticmethod
    def _square_caps(points: List[Point], extend: float) -> List[Point]:
        if len(points) < 2 or extend <= 0:
            return points
        (x0, y0), (x1, y1) = points[0], points[1]
        length = math.hypot(x1 - x0, y1 - y0) or 1
        start = (x0 - (x1 - x0) / length * extend, y0 - (y1 - y0) / length * extend)
        (xa, ya), (xb, yb) = points[-2], points[-1]
        length = math.hypot(xb - xa, yb - ya) or 1
        end = (xb + (xb - xa) / length * extend, yb + (yb - ya) / length * extend)
        return [start] + points[1:-1] + [end]

    def polyline(self, layer, node: LineNode, scale: float, origin: Point):
        color = parse_color(node.stroke)
        if not color:
            return
        scratch, draw = self._leaf_layer(layer)
        points = node.pairs()
        if node.tension:
            points = spline_points(points, node.tension)
        points = [_to_px(x, y, scale, origin) for x, y in points]
        width_px = node.stroke_width * scale
        width = max(1, round(width_px))

        if node.line_cap == 'square':
            points = self._square_caps(points, width_px / 2)

        if node.dash:
            dash = [d * scale for d in node.dash]
            for start, end in dash_segments(points, dash):
                draw.line([start, end], fill=color, width=width)
        else:
            joint = 'curve' if node.line_join == 'round' else None
            draw.line(points, fill=color, width=width, joint=joint)
            if node.line_cap == 'round' and width > 2:
                r = width_px / 2
                for x, y in (points[0], points[-1]):
                    draw.ellipse((x - r, y - r, x + r, y + r), fill=color)
        self._commit(layer, scratch, node.opacity)

    @staticmethod
    def _wrap(text: str, font, max_width: float) -> List[str]:
        lines = []
        for paragraph in text.split('\n'):
            words = paragraph.split(' ')
            current = ''
            for word in words:
                candidate = f"{current} {word}" if current else word
                if current and font.getlength(candidate) > max_width:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    def text(self, layer, node: TextNode, scale: float, origin: Point):
        scratch, draw = self._leaf_layer(layer)
        x0, y0 = _to_px(node.x, node.y, scale, origin)
        box_w = node.width * scale
        box_h = node.height * scale
        pad = node.padding * scale

        background = parse_color(node.background)
        if background:
            draw.rectangle((x0, y0, x0 + box_w, y0 + box_h), fill=background)

        color = parse_color(node.color)
        font = self.fonts.get(node.font_family, node.font_weight, node.font_style,
                              node.font_size * scale)
        inner_w = max(1.0, box_w - 2 * pad)
        lines = self._wrap(node.text or '', font, inner_w)

        line_h = node.font_size * scale * (node.line_height or 1.0)
        if box_h > 0:
            max_lines = max(1, int((box_h - 2 * pad) // line_h)) if line_h > 0 else len(lines)
            lines = lines[:max_lines]

        bbox = font.getbbox('Ag')
        glyph_top, glyph_h = bbox[1], bbox[3] - bbox[1]
        decoration_w = max(1, round(node.font_size * scale / 15))

        for idx, line in enumerate(lines):
            line_w = font.getlength(line)
            left = x0 + pad
            if node.align == 'center':
                left += (inner_w - line_w) / 2
            elif node.align == 'right':
                left += inner_w - line_w
            line_top = y0 + pad + idx * line_h
            text_y = line_top + (line_h - glyph_h) / 2 - glyph_top

            words = line.split(' ')
            is_last = idx == len(lines) - 1
            if node.align == 'justify' and not is_last and len(words) > 1:
                gap = (inner_w - sum(font.getlength(w) for w in words)) / (len(words) - 1)
                cursor = left
                for word in words:
                    draw.text((cursor, text_y), word, font=font, fill=color)
                    cursor += font.getlength(word) + gap
                line_w = inner_w
            else:
                draw.text((left, text_y), line, font=font, fill=color)

            if node.decoration == 'underline':
                y = text_y + glyph_top + glyph_h + decoration_w
                draw.line([(left, y), (left + line_w, y)], fill=color, width=decoration_w)
            elif node.decoration == 'line-through':
                y = text_y + glyph_top + glyph_h / 2
                draw.line([(left, y), (left + line_w, y)], fill=color, width=decoration_w)
        self._commit(layer, scratch, node.opacity)

    def image(self, layer, node: ImageNode, scale: float, origin: Point):
        x0, y0 = _to_px(node.x, node.y, scale, origin)
        size = (max(1, round(node.width * scale)), max(1, round(node.height * scale)))
        tile = node.image.convert('RGBA')
        if tile.size != size:
            tile = tile.resize(size, Image.Resampling.LANCZOS)
        composite_at(layer, _apply_opacity(tile, node.opacity), round(x0), round(y0))

    def group(self, layer, node: GroupNode, scale: float, origin: Point):
        margin = 0 if node.clip else node.margin
        tile = self.new_layer(round((node.width + 2 * margin) * scale),
                              round((node.height + 2 * margin) * scale))
        # Детям недоступна область вне тайла: так работает обрезка группы
        for child in node.children:
            self.draw(tile, child, scale, (margin, margin))
        _apply_opacity(tile, node.opacity)

        rotation = node.rotation or 0
        if rotation % 360:
            tile = tile.rotate(-rotation, resample=Image.Resampling.BICUBIC, expand=True)
        if node.mirrored:
            tile = ImageOps.mirror(tile)

        # Центр тайла после поворота вокруг pivot, в координатах родителя
        px, py = node.pivot
        dx, dy = rotate_point(node.width / 2 - px, node.height / 2 - py, rotation)
        cx, cy = _to_px(node.x + px + dx, node.y + py + dy, scale, origin)
        composite_at(layer, tile, round(cx - tile.width / 2), round(cy - tile.height / 2))


class SheetRasterizer:
    """
    Растеризатор сторон листа.

    Использует одну общую поверхность рисования, которая полностью
    очищается перед каждой стороной; поэтому стороны рисуются строго
    последовательно.
    """

    def __init__(self, backend: Optional[DrawingBackend] = None,
                 config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self.backend = backend or PillowBackend(self.config)
        self._surface = None
        self._surface_size = None

    def _acquire_surface(self, width_px: int, height_px: int):
        if self._surface is None or self._surface_size != (width_px, height_px):
            self._surface = self.backend.new_layer(width_px, height_px)
            self._surface_size = (width_px, height_px)
        self.backend.clear(self._surface, self.config.sheet_background)
        return self._surface

    async def rasterize(self, scene: GroupNode, width: float, height: float,
                        pixel_ratio: float = 2.0) -> Image.Image:
        # Все изображения декодируются до отрисовки
        for node in scene.walk():
            if isinstance(node, ImageNode):
                node.image.load()

        width_px = round(width * pixel_ratio)
        height_px = round(height * pixel_ratio)
        surface = self._acquire_surface(width_px, height_px)

        for child in scene.children:
            self.backend.draw(surface, child, pixel_ratio)

        # Пауза после отрисовки перед снятием пикселей
        await asyncio.sleep(self.config.settle_delay)

        logger.debug(f"Сторона растеризована: {width_px}x{height_px} px")
        return self.backend.snapshot(surface)
