"""
Линии сгиба и метки реза для печатного листа
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .config import ExportOptions, RenderConfig
from .models import ZineFormat
from .scene import LineNode

logger = logging.getLogger(__name__)

FOLD = 'fold'
CUT = 'cut'


@dataclass(frozen=True)
class GuideLine:
    kind: str
    points: Tuple[float, ...]
    stroke: str
    stroke_width: float
    dash: Optional[Tuple[float, ...]] = None

    def to_node(self) -> LineNode:
        return LineNode(
            points=self.points,
            stroke=self.stroke,
            stroke_width=self.stroke_width,
            dash=self.dash
        )


def _fold(config: RenderConfig, *points: float) -> GuideLine:
    return GuideLine(FOLD, tuple(points), config.fold_color, config.fold_width, tuple(config.fold_dash))


def _cut(config: RenderConfig, *points: float, width: Optional[float] = None) -> GuideLine:
    return GuideLine(CUT, tuple(points), config.cut_color,
                     config.cut_width if width is None else width)


def fold_marks(zine_format, width: float, height: float,
               config: RenderConfig) -> List[GuideLine]:
    if zine_format == ZineFormat.QUARTER_FOLD:
        xs = [width / 4, width / 2, width * 3 / 4]
        lines = [_fold(config, x, 0, x, height) for x in xs]
        lines.append(_fold(config, 0, height / 2, width, height / 2))
        return lines
    if zine_format in (ZineFormat.HALF_FOLD, ZineFormat.BOOKLET):
        return [_fold(config, width / 2, 0, width / 2, height)]
    if zine_format == ZineFormat.ACCORDION:
        # Четыре колонки змейки
        xs = [width / 4, width / 2, width * 3 / 4]
        return [_fold(config, x, 0, x, height) for x in xs]
    if zine_format == ZineFormat.TRI_FOLD:
        xs = [width / 3, width * 2 / 3]
        return [_fold(config, x, 0, x, height) for x in xs]
    return []


def _slit_with_notches(config: RenderConfig, x1: float, x2: float, y: float) -> List[GuideLine]:
    notch = config.notch_size
    return [
        _cut(config, x1, y, x2, y, width=config.slit_width),
        _cut(config, x1, y - notch, x1, y + notch, width=config.notch_width),
        _cut(config, x2, y - notch, x2, y + notch, width=config.notch_width),
    ]


def _corner_crop_marks(width: float, height: float, config: RenderConfig) -> List[GuideLine]:
    m = config.crop_mark_margin
    length = config.crop_mark_length
    corners: Sequence[Tuple[float, ...]] = (
        (m, m + length, m, m, m + length, m),
        (width - m, m + length, width - m, m, width - m - length, m),
        (m, height - m - length, m, height - m, m + length, height - m),
        (width - m, height - m - length, width - m, height - m, width - m - length, height - m),
    )
    return [_cut(config, *points) for points in corners]


def cut_marks(zine_format, width: float, height: float,
              config: RenderConfig) -> List[GuideLine]:
    if zine_format == ZineFormat.QUARTER_FOLD:
        # Слит только через две центральные панели
        y = height / 2
        return [_cut(config, width / 4, y, width * 3 / 4, y)]
    if zine_format == ZineFormat.ACCORDION:
        # Резы чередуются и не доходят до противоположного края
        lines = []
        lines += _slit_with_notches(config, 0, width * 3 / 4, height / 4)
        lines += _slit_with_notches(config, width, width / 4, height / 2)
        lines += _slit_with_notches(config, 0, width * 3 / 4, height * 3 / 4)
        return lines
    return _corner_crop_marks(width, height, config)


def generate_guides(zine_format, width: float, height: float,
                    options: ExportOptions,
                    config: Optional[RenderConfig] = None) -> List[GuideLine]:
    config = config or RenderConfig()
    guides = []
    if options.show_fold_marks:
        guides.extend(fold_marks(zine_format, width, height, config))
    if options.show_cut_marks:
        guides.extend(cut_marks(zine_format, width, height, config))
    logger.debug(f"Направляющие для {zine_format}: {len(guides)} линий")
    return guides
