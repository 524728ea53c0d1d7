"""
Чтение и запись документа проекта в формате редактора (JSON)
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ProjectFormatError
from .models import (
    Content, ContentType, DrawingPath, DrawingProperties, ImageProperties,
    Orientation, Page, PageCanvas, PagePosition, PageSize, PrintLayout, Project,
    ProjectMetadata, ShapeProperties, Side, Template, TextProperties, ZineFormat
)

logger = logging.getLogger(__name__)

CURRENT_FORMAT_VERSION = 2


def _enum(enum_cls, value):
    # Неизвестные значения сохраняются как строки: решение принимает импозиция
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _value(item):
    return getattr(item, 'value', item)


def format_datetime(value: datetime) -> str:
    if value.tzinfo is not None and value.utcoffset().total_seconds() == 0:
        return value.astimezone(timezone.utc).replace(tzinfo=None).isoformat() + 'Z'
    return value.isoformat()


def parse_datetime(value: Union[str, datetime, None]) -> datetime:
    if isinstance(value, datetime):
        return value
    if not value:
        raise ProjectFormatError("Отсутствует дата в документе проекта")
    text = value.strip()
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise ProjectFormatError(f"Некорректная дата: {value!r}") from e


# --- шаблон ---

def _position_to_dict(p: PagePosition) -> Dict[str, Any]:
    data = {
        'pageNumber': p.page_number,
        'x': p.x,
        'y': p.y,
        'width': p.width,
        'height': p.height,
        'rotation': p.rotation,
        'isFlipped': p.is_flipped,
    }
    if p.side is not None:
        data['side'] = _value(p.side)
    return data


def _position_from_dict(data: Dict[str, Any]) -> PagePosition:
    side = data.get('side')
    return PagePosition(
        page_number=data['pageNumber'],
        x=data['x'],
        y=data['y'],
        width=data['width'],
        height=data['height'],
        rotation=data.get('rotation', 0),
        is_flipped=data.get('isFlipped', False),
        side=Side(side) if side else None
    )


def template_to_dict(t: Template) -> Dict[str, Any]:
    data = {
        'id': t.id,
        'name': t.name,
        'format': _value(t.format),
        'pageSize': _value(t.page_size),
        'orientation': _value(t.orientation),
        'pageCount': t.page_count,
        'description': t.description,
        'foldInstructions': t.fold_instructions,
        'printLayout': {
            'sheetWidth': t.print_layout.sheet_width,
            'sheetHeight': t.print_layout.sheet_height,
            'pagePositions': [_position_to_dict(p) for p in t.print_layout.page_positions],
        },
    }
    if t.page_canvas is not None:
        data['pageCanvas'] = {'width': t.page_canvas.width, 'height': t.page_canvas.height}
    return data


def template_from_dict(data: Dict[str, Any]) -> Template:
    layout = data.get('printLayout') or {}
    canvas = data.get('pageCanvas')
    return Template(
        id=data['id'],
        name=data.get('name', ''),
        format=_enum(ZineFormat, data.get('format')),
        page_size=_enum(PageSize, data.get('pageSize', 'letter')),
        orientation=_enum(Orientation, data.get('orientation', 'portrait')),
        page_count=data.get('pageCount', 0),
        description=data.get('description', ''),
        fold_instructions=data.get('foldInstructions', ''),
        print_layout=PrintLayout(
            sheet_width=layout.get('sheetWidth', 0),
            sheet_height=layout.get('sheetHeight', 0),
            page_positions=[_position_from_dict(p) for p in layout.get('pagePositions', [])]
        ),
        page_canvas=PageCanvas(canvas['width'], canvas['height']) if canvas else None
    )


# --- содержимое ---

def _properties_to_dict(content: Content) -> Dict[str, Any]:
    p = content.properties
    if isinstance(p, TextProperties):
        data = {
            'text': p.text, 'fontSize': p.font_size, 'fontFamily': p.font_family,
            'fontWeight': p.font_weight, 'fontStyle': p.font_style, 'color': p.color,
            'textAlign': p.text_align, 'lineHeight': p.line_height,
            'textDecoration': p.text_decoration, 'padding': p.padding,
        }
        if p.background_color is not None:
            data['backgroundColor'] = p.background_color
        return data
    if isinstance(p, ImageProperties):
        data = {'src': p.src, 'alt': p.alt, 'opacity': p.opacity}
        if p.filters is not None:
            data['filters'] = p.filters
        if p.asset_id is not None:
            data['assetId'] = p.asset_id
        return data
    if isinstance(p, ShapeProperties):
        data = {
            'shapeType': p.shape_type, 'fill': p.fill, 'stroke': p.stroke,
            'strokeWidth': p.stroke_width, 'opacity': p.opacity,
        }
        if p.corner_radius is not None:
            data['cornerRadius'] = p.corner_radius
        return data
    if isinstance(p, DrawingProperties):
        return {
            'paths': [{'points': [dict(pt) for pt in path.points], 'color': path.color,
                       'width': path.width} for path in p.paths],
            'strokeColor': p.stroke_color, 'strokeWidth': p.stroke_width,
            'opacity': p.opacity, 'lineCap': p.line_cap, 'lineJoin': p.line_join,
            'smoothing': p.smoothing,
        }
    raise ProjectFormatError(f"Неподдерживаемые свойства элемента {content.id}")


def _properties_from_dict(content_type, data: Dict[str, Any]):
    if content_type == ContentType.TEXT:
        return TextProperties(
            text=data.get('text', ''),
            font_size=data.get('fontSize', 16),
            font_family=data.get('fontFamily', 'Arial'),
            font_weight=data.get('fontWeight', 'normal'),
            font_style=data.get('fontStyle', 'normal'),
            color=data.get('color', '#000000'),
            text_align=data.get('textAlign', 'left'),
            line_height=data.get('lineHeight', 1.2),
            text_decoration=data.get('textDecoration', 'none'),
            background_color=data.get('backgroundColor'),
            padding=data.get('padding', 0)
        )
    if content_type == ContentType.IMAGE:
        return ImageProperties(
            src=data.get('src', ''),
            alt=data.get('alt', ''),
            opacity=data.get('opacity', 1.0),
            filters=data.get('filters'),
            asset_id=data.get('assetId')
        )
    if content_type == ContentType.SHAPE:
        return ShapeProperties(
            shape_type=data.get('shapeType', 'rectangle'),
            fill=data.get('fill', '#000000'),
            stroke=data.get('stroke', '#000000'),
            stroke_width=data.get('strokeWidth', 0),
            opacity=data.get('opacity', 1.0),
            corner_radius=data.get('cornerRadius')
        )
    if content_type == ContentType.DRAWING:
        return DrawingProperties(
            paths=[DrawingPath(
                points=[{'x': pt['x'], 'y': pt['y']} for pt in path.get('points', [])],
                color=path.get('color', '#000000'),
                width=path.get('width', 2)
            ) for path in data.get('paths', [])],
            stroke_color=data.get('strokeColor', '#000000'),
            stroke_width=data.get('strokeWidth', 2),
            opacity=data.get('opacity', 1.0),
            line_cap=data.get('lineCap', 'round'),
            line_join=data.get('lineJoin', 'round'),
            smoothing=data.get('smoothing', False)
        )
    raise ProjectFormatError(f"Неизвестный тип элемента: {content_type!r}")


def content_to_dict(c: Content) -> Dict[str, Any]:
    data = {
        'id': c.id,
        'type': _value(c.type),
        'x': c.x,
        'y': c.y,
        'width': c.width,
        'height': c.height,
        'rotation': c.rotation,
        'zIndex': c.z_index,
        'properties': _properties_to_dict(c),
        'visible': c.visible,
        'locked': c.locked,
    }
    if c.group_id is not None:
        data['groupId'] = c.group_id
    if c.name is not None:
        data['name'] = c.name
    return data


def content_from_dict(data: Dict[str, Any]) -> Content:
    try:
        content_type = ContentType(data['type'])
    except (KeyError, ValueError) as e:
        raise ProjectFormatError(f"Некорректный тип элемента: {data.get('type')!r}") from e
    return Content(
        id=data['id'],
        type=content_type,
        x=data.get('x', 0),
        y=data.get('y', 0),
        width=data.get('width', 0),
        height=data.get('height', 0),
        properties=_properties_from_dict(content_type, data.get('properties') or {}),
        rotation=data.get('rotation', 0),
        z_index=data.get('zIndex', 0),
        visible=data.get('visible', True),
        locked=data.get('locked', False),
        group_id=data.get('groupId'),
        name=data.get('name')
    )


def page_to_dict(page: Page) -> Dict[str, Any]:
    data = {
        'id': page.id,
        'pageNumber': page.page_number,
        'title': page.title,
        'content': [content_to_dict(c) for c in page.content],
        'backgroundColor': page.background_color,
    }
    if page.background_image is not None:
        data['backgroundImage'] = page.background_image
    return data


def page_from_dict(data: Dict[str, Any]) -> Page:
    page = Page(
        id=data['id'],
        page_number=data['pageNumber'],
        title=data.get('title', ''),
        content=[content_from_dict(c) for c in data.get('content', [])],
        background_color=data.get('backgroundColor', '#ffffff'),
        background_image=data.get('backgroundImage')
    )
    page.sort_content()
    return page


# --- проект ---

def project_to_dict(project: Project) -> Dict[str, Any]:
    data = {
        'id': project.id,
        'name': project.name,
        'template': template_to_dict(project.template),
        'pages': [page_to_dict(p) for p in project.pages],
        'createdAt': format_datetime(project.created_at),
        'modifiedAt': format_datetime(project.modified_at),
        'metadata': {
            'author': project.metadata.author,
            'description': project.metadata.description,
            'tags': list(project.metadata.tags),
        },
    }
    if project.format_version is not None:
        data['formatVersion'] = project.format_version
    return data


def project_from_dict(data: Dict[str, Any]) -> Project:
    # Примеры хранятся в обертке {"project": {...}}
    if 'project' in data and isinstance(data['project'], dict):
        data = data['project']

    try:
        metadata = data.get('metadata') or {}
        format_version = data.get('formatVersion')
        if not format_version:
            logger.info(f"Проект {data.get('id')}: formatVersion отсутствует, миграция на "
                        f"{CURRENT_FORMAT_VERSION}")
            format_version = CURRENT_FORMAT_VERSION

        return Project(
            id=data['id'],
            name=data.get('name', ''),
            template=template_from_dict(data['template']),
            pages=[page_from_dict(p) for p in data.get('pages', [])],
            created_at=parse_datetime(data.get('createdAt')),
            modified_at=parse_datetime(data.get('modifiedAt')),
            metadata=ProjectMetadata(
                author=metadata.get('author', ''),
                description=metadata.get('description', ''),
                tags=list(metadata.get('tags', []))
            ),
            format_version=format_version
        )
    except KeyError as e:
        raise ProjectFormatError(f"В документе проекта нет поля {e}") from e


def dumps_project(project: Project, indent: Optional[int] = 2) -> str:
    return json.dumps(project_to_dict(project), indent=indent, ensure_ascii=False)


def loads_project(text: str) -> Project:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ProjectFormatError(f"Некорректный JSON проекта: {e}") from e
    if not isinstance(data, dict):
        raise ProjectFormatError("Документ проекта должен быть объектом JSON")
    return project_from_dict(data)


def save_project_file(project: Project, path: Union[str, Path]):
    path = Path(path)
    path.write_text(dumps_project(project), encoding='utf-8')
    logger.info(f"Проект сохранен: {path}")


def load_project_file(path: Union[str, Path]) -> Project:
    path = Path(path)
    project = loads_project(path.read_text(encoding='utf-8'))
    logger.info(f"Проект загружен: {path} ({len(project.pages)} стр.)")
    return project
