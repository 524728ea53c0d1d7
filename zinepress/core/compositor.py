"""
Построение сцены страницы: фон, номер страницы и элементы содержимого
"""
import asyncio
import logging
from typing import List, Optional, Tuple

from .config import ExportOptions, RenderConfig
from .exceptions import AssetLoadFailedError, AssetNotFoundError
from .models import (
    Content, ContentType, DrawingProperties, ExportWarning, ImageProperties,
    Page, ShapeProperties, Slot, TextProperties
)
from .scene import (
    EllipseNode, GroupNode, ImageNode, LineNode, Node, PolygonNode, RectNode, TextNode
)
from ..processing.image_loader import load_asset_image, load_image_source
from ..utils.helpers import rotate_point, spline_points

logger = logging.getLogger(__name__)

ASSET_NOT_FOUND = 'AssetNotFound'
ASSET_LOAD_FAILED = 'AssetLoadFailed'


class ContentCompositor:
    def __init__(self, asset_provider, options: Optional[ExportOptions] = None,
                 config: Optional[RenderConfig] = None):
        self.asset_provider = asset_provider
        self.options = options or ExportOptions()
        self.config = config or RenderConfig()

    def _element_group(self, content: Content, pivot=(0.0, 0.0), margin: float = 0) -> GroupNode:
        return GroupNode(
            x=content.x,
            y=content.y,
            width=content.width,
            height=content.height,
            rotation=content.rotation or 0,
            pivot=pivot,
            clip=False,
            margin=margin,
            name=content.id
        )

    def _text_node(self, content: Content) -> GroupNode:
        p: TextProperties = content.properties
        group = self._element_group(content, margin=max(p.font_size, 4))
        group.add(TextNode(
            x=0, y=0,
            width=content.width,
            height=content.height,
            text=p.text,
            font_size=p.font_size,
            font_family=p.font_family,
            font_weight=p.font_weight,
            font_style=p.font_style,
            color=p.color,
            align=p.text_align,
            line_height=p.line_height or 1.0,
            decoration=p.text_decoration,
            background=p.background_color,
            padding=p.padding or 0
        ))
        return group

    def _shape_node(self, content: Content) -> GroupNode:
        p: ShapeProperties = content.properties
        w, h = content.width, content.height
        margin = (p.stroke_width or 0) + 2
        stroke = p.stroke if p.stroke_width else None

        if p.shape_type == 'circle':
            r = min(w, h) / 2
            group = self._element_group(content, pivot=(r, r), margin=margin)
            group.add(EllipseNode(r, r, r, fill=p.fill, stroke=stroke, stroke_width=p.stroke_width))
        elif p.shape_type == 'triangle':
            r = min(w, h) / 2
            cx, cy = w / 2, h / 2
            vertices = []
            for i in range(3):
                dx, dy = rotate_point(0, -r, i * 120)
                vertices.append((cx + dx, cy + dy))
            group = self._element_group(content, pivot=(cx, cy), margin=margin)
            group.add(PolygonNode(vertices, fill=p.fill, stroke=stroke, stroke_width=p.stroke_width))
        elif p.shape_type == 'rectangle':
            group = self._element_group(content, margin=margin)
            group.add(RectNode(0, 0, w, h, fill=p.fill, stroke=stroke,
                               stroke_width=p.stroke_width, corner_radius=p.corner_radius or 0))
        else:
            # Линия: горизонтальный отрезок по середине рамки
            group = self._element_group(content, margin=margin)
            group.add(LineNode(
                points=(0, h / 2, w, h / 2),
                stroke=p.stroke,
                stroke_width=p.stroke_width or 1,
                line_cap='round'
            ))
        group.opacity = p.opacity if p.opacity is not None else 1.0
        return group

    @staticmethod
    def _overflow(content: Content, paths: List[List[float]], tension: float) -> float:
        """Насколько точки линий выходят за рамку элемента (с учетом сглаживания)"""
        overflow = 0.0
        for points in paths:
            pairs = [(points[i], points[i + 1]) for i in range(0, len(points) - 1, 2)]
            if tension:
                pairs = spline_points(pairs, tension)
            for x, y in pairs:
                overflow = max(overflow, -x, -y, x - content.width, y - content.height)
        return overflow

    def _drawing_node(self, content: Content) -> GroupNode:
        p: DrawingProperties = content.properties
        tension = self.config.smoothing_tension if p.smoothing else 0
        paths = [path.flat_points() for path in p.paths]
        paths = [points for points in paths if len(points) >= 2]
        # Штрихи не обрезаются рамкой элемента: запас покрывает все точки
        margin = self._overflow(content, paths, tension) + (p.stroke_width or 0) + 2
        group = self._element_group(content, margin=margin)
        for points in paths:
            group.add(LineNode(
                points=points,
                stroke=p.stroke_color,
                stroke_width=p.stroke_width,
                line_cap=p.line_cap or 'round',
                line_join=p.line_join or 'round',
                tension=tension
            ))
        group.opacity = p.opacity if p.opacity is not None else 1.0
        return group

    async def _image_node(self, content: Content) -> GroupNode:
        p: ImageProperties = content.properties
        if p.asset_id:
            image = await load_asset_image(p.asset_id, self.asset_provider)
        else:
            image = await load_image_source(p.src, timeout=self.config.http_timeout)

        group = self._element_group(content)
        group.add(ImageNode(0, 0, content.width, content.height, image))
        group.opacity = p.opacity if p.opacity is not None else 1.0
        return group

    async def create_node(self, content: Content) -> Optional[Node]:
        """Узел сцены для элемента; ошибки загрузки изображения пробрасываются"""
        try:
            content_type = ContentType(content.type)
        except ValueError:
            logger.warning(f"Неизвестный тип элемента {content.type!r} ({content.id}) пропущен")
            return None
        if content_type == ContentType.TEXT:
            return self._text_node(content)
        if content_type == ContentType.SHAPE:
            return self._shape_node(content)
        if content_type == ContentType.DRAWING:
            return self._drawing_node(content)
        if content_type == ContentType.IMAGE:
            return await self._image_node(content)
        return None

    async def _safe_node(self, page: Page,
                         content: Content) -> Tuple[Optional[Node], Optional[ExportWarning]]:
        try:
            return await self.create_node(content), None
        except AssetNotFoundError as e:
            code = ASSET_NOT_FOUND
            error = e
        except AssetLoadFailedError as e:
            code = ASSET_LOAD_FAILED
            error = e
        logger.warning(f"Элемент {content.id} на стр. {page.page_number} пропущен: {error}")
        return None, ExportWarning(code, str(error), page.page_number, content.id)

    async def _background_image(self, page: Page, slot: Slot,
                                warnings: List[ExportWarning]) -> Optional[ImageNode]:
        try:
            image = await load_image_source(page.background_image, timeout=self.config.http_timeout)
        except AssetLoadFailedError as e:
            logger.warning(f"Фон стр. {page.page_number} не загружен: {e}")
            warnings.append(ExportWarning(ASSET_LOAD_FAILED, str(e), page.page_number))
            return None
        return ImageNode(0, 0, slot.width, slot.height, image)

    async def compose_page(self, page: Page, slot: Slot,
                           warnings: List[ExportWarning]) -> GroupNode:
        group = GroupNode(
            x=slot.x,
            y=slot.y,
            width=slot.width,
            height=slot.height,
            rotation=slot.rotation,
            mirrored=slot.mirrored,
            pivot=(slot.width / 2, slot.height / 2),
            clip=True,
            name=f"page-{page.page_number}"
        )
        group.add(RectNode(0, 0, slot.width, slot.height,
                           fill=page.background_color or self.config.blank_page_color))

        if page.background_image:
            background = await self._background_image(page, slot, warnings)
            if background is not None:
                group.add(background)

        if self.options.show_page_numbers and page.page_number:
            # Подпись по ширине текста начинается в точке отступа от правого нижнего угла
            off_x, off_y = self.config.page_number_offset
            group.add(TextNode(
                x=slot.width - off_x,
                y=slot.height - off_y,
                width=off_x,
                height=off_y,
                text=str(page.page_number),
                font_size=self.config.page_number_size,
                color=self.config.page_number_color,
                align='left'
            ))

        items = sorted(page.content, key=lambda c: c.z_index or 0)
        items = [c for c in items if c.visible is not False]
        # Загрузка элементов идет параллельно; узлы и предупреждения идут в порядке слоев
        results = await asyncio.gather(*(self._safe_node(page, c) for c in items))
        for node, warning in results:
            if warning is not None:
                warnings.append(warning)
            if node is not None:
                group.add(node)

        return group


async def compose_page(page: Page, slot: Slot, asset_provider,
                       options: Optional[ExportOptions] = None,
                       warnings: Optional[List[ExportWarning]] = None,
                       config: Optional[RenderConfig] = None) -> GroupNode:
    compositor = ContentCompositor(asset_provider, options, config)
    return await compositor.compose_page(page, slot, warnings if warnings is not None else [])
