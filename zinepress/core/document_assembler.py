"""
Сборка растров сторон листов в многостраничный PDF
"""
import logging
from io import BytesIO
from typing import List, Optional, Tuple

from PIL import Image
from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from .config import POINTS_PER_INCH
from .exceptions import DocumentAssemblyError
from .models import Orientation

logger = logging.getLogger(__name__)


def sheet_orientation(sheet_width: float, sheet_height: float) -> Orientation:
    width_in = sheet_width / POINTS_PER_INCH
    height_in = sheet_height / POINTS_PER_INCH
    return Orientation.LANDSCAPE if width_in > height_in else Orientation.PORTRAIT


def page_size(sheet_width: float, sheet_height: float) -> Tuple[float, float]:
    """Размер страницы PDF в пунктах по физическому размеру листа"""
    size = ((sheet_width / POINTS_PER_INCH) * inch, (sheet_height / POINTS_PER_INCH) * inch)
    if sheet_orientation(sheet_width, sheet_height) == Orientation.LANDSCAPE:
        return landscape(size)
    return portrait(size)


def _png_reader(image: Image.Image) -> ImageReader:
    # PNG без потерь; reportlab сохраняет его через Flate
    buffer = BytesIO()
    image.save(buffer, format='PNG')
    buffer.seek(0)
    return ImageReader(buffer)


def assemble_document(images: List[Image.Image], sheet_width: float, sheet_height: float,
                      title: Optional[str] = None, author: Optional[str] = None) -> bytes:
    if not images:
        raise DocumentAssemblyError("Нет изображений для сборки документа")

    page_width, page_height = page_size(sheet_width, sheet_height)
    orientation = sheet_orientation(sheet_width, sheet_height)
    logger.info(f"Сборка PDF: {len(images)} стр., {page_width:.0f}x{page_height:.0f} pt, "
                f"{orientation.value}")

    buffer = BytesIO()
    try:
        c = canvas.Canvas(buffer, pagesize=(page_width, page_height))
        if title:
            c.setTitle(title)
        if author:
            c.setAuthor(author)

        for image in images:
            # Растр масштабируется к физическому размеру листа, не к пиксельному
            c.drawImage(_png_reader(image), 0, 0, width=page_width, height=page_height)
            c.showPage()

        c.save()
    except Exception as e:
        logger.error(f"Ошибка сборки PDF: {e}")
        raise DocumentAssemblyError(f"Ошибка сборки PDF: {e}") from e

    return buffer.getvalue()
