# tests/fixtures.py
import base64
from io import BytesIO

from PIL import Image

from zinepress.core.config import RenderConfig
from zinepress.core.models import (
    Content, ContentType, DrawingPath, DrawingProperties, ImageProperties,
    ShapeProperties, TextProperties
)


def png_bytes(size=(40, 40), color='red') -> bytes:
    """PNG в памяти"""
    buffer = BytesIO()
    Image.new('RGB', size, color=color).save(buffer, format='PNG')
    return buffer.getvalue()


def data_url(size=(40, 40), color='red') -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(size, color)).decode()


def fast_config() -> RenderConfig:
    """Конфиг без паузы после отрисовки, чтобы тесты шли быстро"""
    return RenderConfig(settle_delay=0)


def text_content(content_id='text-1', z_index=0, **props) -> Content:
    return Content(
        id=content_id, type=ContentType.TEXT, x=10, y=10, width=150, height=40,
        properties=TextProperties(text=props.pop('text', 'Hello zine'), **props),
        z_index=z_index
    )


def shape_content(shape_type='rectangle', content_id='shape-1', z_index=0,
                  x=0, y=0, width=60, height=40, **props) -> Content:
    return Content(
        id=content_id, type=ContentType.SHAPE, x=x, y=y, width=width, height=height,
        properties=ShapeProperties(shape_type=shape_type, **props),
        z_index=z_index
    )


def image_content(content_id='image-1', z_index=0, src='', asset_id=None,
                  x=10, y=10, width=100, height=100) -> Content:
    return Content(
        id=content_id, type=ContentType.IMAGE, x=x, y=y, width=width, height=height,
        properties=ImageProperties(src=src, asset_id=asset_id),
        z_index=z_index
    )


def drawing_content(content_id='drawing-1', z_index=0, smoothing=False, points=None,
                    x=5, y=5, width=30, height=30, stroke_width=3) -> Content:
    if points is None:
        points = [(0, 0), (10, 5), (20, 0)]
    path = DrawingPath(points=[{'x': px, 'y': py} for px, py in points])
    return Content(
        id=content_id, type=ContentType.DRAWING, x=x, y=y, width=width, height=height,
        properties=DrawingProperties(paths=[path], stroke_color='#ff0000',
                                     stroke_width=stroke_width, smoothing=smoothing),
        z_index=z_index
    )
