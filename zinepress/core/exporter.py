"""
Экспорт проекта зина: импозиция, растеризация сторон и сборка PDF
"""
import asyncio
import logging
from typing import List, Optional

from .compositor import ContentCompositor
from .config import ExportOptions, RenderConfig
from .document_assembler import assemble_document
from .exceptions import MissingTemplateError
from .guides import generate_guides
from .layout_resolver import resolve
from .models import ExportResult, ExportWarning, Page, Project, SheetSide, Side, Template
from .rasterizer import SheetRasterizer
from .scene import GroupNode, RectNode
from .templates import default_catalog

logger = logging.getLogger(__name__)


class ZineExporter:
    def __init__(self, asset_provider, options: Optional[ExportOptions] = None,
                 template_provider=None, config: Optional[RenderConfig] = None):
        self.options = (options or ExportOptions()).validate()
        self.config = config or RenderConfig()
        self.template_provider = template_provider if template_provider is not None else default_catalog
        self.compositor = ContentCompositor(asset_provider, self.options, self.config)
        self.rasterizer = SheetRasterizer(config=self.config)

    def current_template(self, project: Project) -> Template:
        # Шаблон всегда берется у поставщика: копия в проекте может быть устаревшей
        template_id = project.template.id
        template = self.template_provider.get_template(template_id)
        if template is None:
            logger.error(f"Шаблон проекта {project.id} не найден: {template_id}")
            raise MissingTemplateError(template_id)
        return template

    def _page_for_slot(self, project: Project, page_number: int) -> Optional[Page]:
        if page_number == 0:
            blank = Page.blank(0)
            blank.background_color = self.config.blank_page_color
            return blank
        return project.get_page(page_number)

    async def build_scene(self, project: Project, template: Template, side: SheetSide,
                          warnings: List[ExportWarning]) -> GroupNode:
        width = template.print_layout.sheet_width
        height = template.print_layout.sheet_height
        scene = GroupNode(0, 0, width, height, name=f"sheet-{side.sheet_index}-{side.side.value}")
        scene.add(RectNode(0, 0, width, height, fill=self.config.sheet_background))

        for slot in side.slots:
            page = self._page_for_slot(project, slot.page_number)
            if page is None:
                logger.warning(f"Страница {slot.page_number} отсутствует в проекте {project.id}, "
                               f"ячейка пропущена")
                continue
            scene.add(await self.compositor.compose_page(page, slot, warnings))

        # Направляющие рисуются поверх содержимого
        for guide in generate_guides(template.format, width, height, self.options, self.config):
            scene.add(guide.to_node())
        return scene

    async def export(self, project: Project) -> ExportResult:
        template = self.current_template(project)
        width = template.print_layout.sheet_width
        height = template.print_layout.sheet_height
        pixel_ratio = self.options.pixel_ratio

        sides = resolve(template, len(project.pages))
        if not sides:
            # Проект без страниц: один пустой лист, чтобы документ не был пустым
            logger.warning(f"Проект {project.id} без страниц: экспортируется пустой лист")
            sides = [SheetSide(0, Side.FRONT, [])]
        logger.info(f"Экспорт '{project.name}' ({template.format}): {len(sides)} сторон, "
                    f"лист {width}x{height} pt, x{pixel_ratio}")

        warnings: List[ExportWarning] = []
        images = []
        for side in sides:
            logger.debug(f"Отрисовка листа {side.sheet_index} ({side.side.value}): "
                         f"страницы {side.page_numbers}")
            scene = await self.build_scene(project, template, side, warnings)
            images.append(await self.rasterizer.rasterize(scene, width, height, pixel_ratio))

        document = assemble_document(images, width, height,
                                     title=project.name, author=project.metadata.author or None)

        if warnings:
            logger.warning(f"Экспорт завершен с предупреждениями: {len(warnings)}")
        else:
            logger.info(f"Экспорт завершен: {len(images)} изображений")

        return ExportResult(
            images=images,
            document=document,
            width=round(width * pixel_ratio),
            height=round(height * pixel_ratio),
            warnings=warnings,
            sides=sides
        )


async def export_project(project: Project, asset_provider,
                         options: Optional[ExportOptions] = None,
                         template_provider=None,
                         config: Optional[RenderConfig] = None) -> ExportResult:
    exporter = ZineExporter(asset_provider, options, template_provider, config)
    return await exporter.export(project)


def export_project_sync(project: Project, asset_provider,
                        options: Optional[ExportOptions] = None,
                        template_provider=None,
                        config: Optional[RenderConfig] = None) -> ExportResult:
    return asyncio.run(export_project(project, asset_provider, options, template_provider, config))
