"""
Примитивы сцены для отрисовки листа.

Компоновщик строит дерево из этих узлов, растеризатор обходит его и
передает каждый узел бэкенду рисования. Координаты заданы в пунктах
(72 на дюйм) относительно родительской группы; масштаб в пиксели
применяется только при растеризации.
"""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from PIL import Image


@dataclass
class Node:
    opacity: float = field(default=1.0, kw_only=True)


@dataclass
class RectNode(Node):
    x: float
    y: float
    width: float
    height: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0
    corner_radius: float = 0


@dataclass
class EllipseNode(Node):
    cx: float
    cy: float
    radius: float
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0


@dataclass
class PolygonNode(Node):
    points: Sequence[Tuple[float, float]]
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 0


@dataclass
class LineNode(Node):
    points: Sequence[float]  # x0, y0, x1, y1, ...
    stroke: str = '#000000'
    stroke_width: float = 1
    dash: Optional[Tuple[float, ...]] = None
    line_cap: str = 'butt'
    line_join: str = 'miter'
    tension: float = 0

    def pairs(self) -> List[Tuple[float, float]]:
        return [(self.points[i], self.points[i + 1]) for i in range(0, len(self.points) - 1, 2)]


@dataclass
class TextNode(Node):
    x: float
    y: float
    width: float
    height: float
    text: str
    font_size: float = 16
    font_family: str = 'Arial'
    font_weight: str = 'normal'
    font_style: str = 'normal'
    color: str = '#000000'
    align: str = 'left'
    line_height: float = 1.0
    decoration: str = 'none'
    background: Optional[str] = None
    padding: float = 0


@dataclass
class ImageNode(Node):
    x: float
    y: float
    width: float
    height: float
    image: Image.Image


@dataclass
class GroupNode(Node):
    """
    Группа с локальной системой координат.

    Порядок преобразований: содержимое рисуется в локальной системе,
    затем поворот вокруг pivot, затем зеркальное отражение по ширине.
    """
    x: float
    y: float
    width: float
    height: float
    children: List[Node] = field(default_factory=list)
    rotation: float = 0
    mirrored: bool = False
    pivot: Tuple[float, float] = (0.0, 0.0)
    clip: bool = True
    # Запас вокруг незакрепленной группы под обводку и выступающий текст
    margin: float = 0
    name: str = ''

    def add(self, node: Node) -> 'GroupNode':
        self.children.append(node)
        return self

    def walk(self) -> Iterator[Node]:
        for child in self.children:
            yield child
            if isinstance(child, GroupNode):
                yield from child.walk()
