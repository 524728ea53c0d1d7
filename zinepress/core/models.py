"""
Data classes и Enum для движка импозиции и экспорта зинов
"""
import uuid
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from PIL import Image

logger = logging.getLogger(__name__)


class ZineFormat(str, Enum):
    QUARTER_FOLD = "quarter-fold"
    HALF_FOLD = "half-fold"
    TRI_FOLD = "tri-fold"
    BOOKLET = "booklet"
    FLIPBOOK = "flipbook"
    ACCORDION = "accordion"


class PageSize(str, Enum):
    LETTER = "letter"
    A4 = "a4"
    LEGAL = "legal"
    TABLOID = "tabloid"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class Side(str, Enum):
    FRONT = "front"
    BACK = "back"


class ContentType(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    SHAPE = "shape"
    DRAWING = "drawing"


@dataclass
class PagePosition:
    page_number: int
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0
    is_flipped: bool = False
    side: Optional[Side] = None


@dataclass
class PrintLayout:
    sheet_width: float
    sheet_height: float
    page_positions: List[PagePosition] = field(default_factory=list)

    def positions_for_side(self, side: Side) -> List[PagePosition]:
        return [p for p in self.page_positions if p.side == side]


@dataclass
class PageCanvas:
    width: float
    height: float


@dataclass
class Template:
    id: str
    name: str
    format: ZineFormat
    page_size: PageSize
    orientation: Orientation
    page_count: int
    description: str
    fold_instructions: str
    print_layout: PrintLayout
    page_canvas: Optional[PageCanvas] = None


@dataclass
class TextProperties:
    text: str = ""
    font_size: float = 16
    font_family: str = "Arial"
    font_weight: str = "normal"
    font_style: str = "normal"
    color: str = "#000000"
    text_align: str = "left"
    line_height: float = 1.2
    text_decoration: str = "none"
    background_color: Optional[str] = None
    padding: float = 0


@dataclass
class ImageProperties:
    src: str = ""
    alt: str = ""
    opacity: float = 1.0
    filters: Optional[str] = None
    asset_id: Optional[Union[int, str]] = None


@dataclass
class ShapeProperties:
    shape_type: str = "rectangle"
    fill: str = "#000000"
    stroke: str = "#000000"
    stroke_width: float = 0
    opacity: float = 1.0
    corner_radius: Optional[float] = None


@dataclass
class DrawingPath:
    points: List[Dict[str, float]] = field(default_factory=list)
    color: str = "#000000"
    width: float = 2

    def flat_points(self) -> List[float]:
        flat = []
        for point in self.points:
            flat.extend((point["x"], point["y"]))
        return flat


@dataclass
class DrawingProperties:
    paths: List[DrawingPath] = field(default_factory=list)
    stroke_color: str = "#000000"
    stroke_width: float = 2
    opacity: float = 1.0
    line_cap: str = "round"
    line_join: str = "round"
    smoothing: bool = False


ContentProperties = Union[TextProperties, ImageProperties, ShapeProperties, DrawingProperties]


@dataclass
class Content:
    id: str
    type: ContentType
    x: float
    y: float
    width: float
    height: float
    properties: ContentProperties
    rotation: float = 0
    z_index: int = 0
    visible: bool = True
    locked: bool = False
    group_id: Optional[str] = None
    name: Optional[str] = None

    @staticmethod
    def new_id() -> str:
        return f"content-{uuid.uuid4().hex[:12]}"


@dataclass
class Page:
    id: str
    page_number: int
    title: str = ""
    content: List[Content] = field(default_factory=list)
    background_color: str = "#ffffff"
    background_image: Optional[str] = None

    def sort_content(self):
        # sorted() стабилен: элементы с одинаковым z_index сохраняют порядок
        self.content = sorted(self.content, key=lambda c: c.z_index or 0)

    def add_content(self, content: Content):
        self.content.append(content)
        self.sort_content()

    def reorder_content(self, order: List[str]):
        by_id = {c.id: c for c in self.content}
        for idx, content_id in enumerate(order):
            if content_id in by_id:
                by_id[content_id].z_index = idx
        self.sort_content()

    @classmethod
    def blank(cls, page_number: int) -> 'Page':
        """Пустая страница-заполнитель (номер 0)"""
        return cls(id=f"blank-{page_number}", page_number=page_number)


@dataclass
class ProjectMetadata:
    author: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)


@dataclass
class Project:
    id: str
    name: str
    template: Template
    pages: List[Page] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    modified_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: ProjectMetadata = field(default_factory=ProjectMetadata)
    format_version: Optional[int] = None

    def get_page(self, page_number: int) -> Optional[Page]:
        for page in self.pages:
            if page.page_number == page_number:
                return page
        return None

    @classmethod
    def create(cls, name: str, template: Template) -> 'Project':
        pages = []
        for i in range(template.page_count):
            page_number = i + 1
            if page_number == 1:
                title = "Front Cover"
            elif page_number == template.page_count:
                title = "Back Cover"
            else:
                title = f"Page {page_number}"
            pages.append(Page(id=f"page-{page_number}", page_number=page_number, title=title))

        now = datetime.now(timezone.utc)
        logger.info(f"Создан проект '{name}' по шаблону {template.id}: {len(pages)} стр.")
        return cls(
            id=f"project-{uuid.uuid4().hex[:12]}",
            name=name,
            template=template,
            pages=pages,
            created_at=now,
            modified_at=now,
            format_version=2
        )


@dataclass(frozen=True)
class Slot:
    page_number: int
    x: float
    y: float
    width: float
    height: float
    rotation: float = 0
    mirrored: bool = False

    @classmethod
    def from_position(cls, position: PagePosition, page_number: Optional[int] = None) -> 'Slot':
        return cls(
            page_number=position.page_number if page_number is None else page_number,
            x=position.x,
            y=position.y,
            width=position.width,
            height=position.height,
            rotation=position.rotation,
            mirrored=position.is_flipped
        )


@dataclass
class SheetSide:
    sheet_index: int
    side: Side
    slots: List[Slot] = field(default_factory=list)

    @property
    def page_numbers(self) -> List[int]:
        return [slot.page_number for slot in self.slots]


@dataclass
class ExportWarning:
    code: str
    message: str
    page_number: Optional[int] = None
    content_id: Optional[str] = None

    def __str__(self):
        where = f"стр. {self.page_number}" if self.page_number is not None else "лист"
        return f"[{self.code}] {where}: {self.message}"


@dataclass
class ExportResult:
    images: List[Image.Image]
    document: bytes
    width: int
    height: int
    warnings: List[ExportWarning] = field(default_factory=list)
    sides: List[SheetSide] = field(default_factory=list)

    def save(self, directory: Path, basename: str = "zine") -> List[Path]:
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        written = []
        for idx, image in enumerate(self.images, start=1):
            path = directory / f"{basename}-{idx}.png"
            image.save(path, format='PNG')
            written.append(path)

        pdf_path = directory / f"{basename}.pdf"
        pdf_path.write_bytes(self.document)
        written.append(pdf_path)

        logger.info(f"Результат экспорта сохранен в {directory}: {len(written)} файлов")
        return written
