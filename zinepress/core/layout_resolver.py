"""
Расчет раскладки страниц зина на печатных листах (импозиция)
"""
import math
import logging
from typing import Callable, Dict, List, Sequence

from .exceptions import UnknownFormatError
from .models import PagePosition, SheetSide, Side, Slot, Template, ZineFormat

logger = logging.getLogger(__name__)

# Канонический порядок "8-страничного зина": верхний ряд перевернут
QUARTER_FOLD_ORDER = ((4, 3, 2, 7), (5, 6, 8, 1))
# Змейка для гармошки на 16 страниц
ACCORDION_ORDER = ((4, 3, 2, 1), (5, 6, 7, 8), (12, 11, 10, 9), (13, 14, 15, 16))


def grid_positions(sheet_width: float, sheet_height: float,
                   order: Sequence[Sequence[int]],
                   flipped_rows: Sequence[int] = (),
                   side: Side = Side.FRONT) -> List[PagePosition]:
    rows = len(order)
    cols = len(order[0])
    cell_width = sheet_width / cols
    cell_height = sheet_height / rows

    positions = []
    for row, page_numbers in enumerate(order):
        rotation = 180 if row in flipped_rows else 0
        for col, page_number in enumerate(page_numbers):
            positions.append(PagePosition(
                page_number=page_number,
                x=col * cell_width,
                y=row * cell_height,
                width=cell_width,
                height=cell_height,
                rotation=rotation,
                is_flipped=False,
                side=side
            ))
    return positions


def quarter_fold_positions(sheet_width: float, sheet_height: float) -> List[PagePosition]:
    return grid_positions(sheet_width, sheet_height, QUARTER_FOLD_ORDER, flipped_rows=(0,))


def accordion_positions(sheet_width: float, sheet_height: float) -> List[PagePosition]:
    return grid_positions(sheet_width, sheet_height, ACCORDION_ORDER, flipped_rows=(0, 2))


def half_fold_positions(sheet_width: float, sheet_height: float) -> List[PagePosition]:
    return (grid_positions(sheet_width, sheet_height, ((4, 1),), side=Side.FRONT) +
            grid_positions(sheet_width, sheet_height, ((2, 3),), side=Side.BACK))


def tri_fold_positions(sheet_width: float, sheet_height: float) -> List[PagePosition]:
    return (grid_positions(sheet_width, sheet_height, ((5, 6, 1),), side=Side.FRONT) +
            grid_positions(sheet_width, sheet_height, ((2, 3, 4),), side=Side.BACK))


def flipbook_positions(sheet_width: float, sheet_height: float) -> List[PagePosition]:
    return (grid_positions(sheet_width, sheet_height, ((2, 1),), side=Side.FRONT) +
            grid_positions(sheet_width, sheet_height, ((3, 4),), side=Side.BACK))


def _template_positions(template: Template,
                        default: Callable[[float, float], List[PagePosition]]) -> List[PagePosition]:
    layout = template.print_layout
    if layout.page_positions:
        return layout.page_positions
    logger.debug(f"Шаблон {template.id} без позиций, используется стандартная сетка")
    return default(layout.sheet_width, layout.sheet_height)


def _by_side(positions: List[PagePosition], side: Side) -> List[PagePosition]:
    # Позиции без пометки стороны считаются лицевыми
    if side == Side.FRONT:
        return [p for p in positions if p.side in (None, Side.FRONT)]
    return [p for p in positions if p.side == side]


def _single_side(template: Template, page_count: int,
                 default: Callable[[float, float], List[PagePosition]]) -> List[SheetSide]:
    positions = _template_positions(template, default)
    return [SheetSide(0, Side.FRONT, [Slot.from_position(p) for p in positions])]


def _double_side(template: Template, page_count: int,
                 default: Callable[[float, float], List[PagePosition]]) -> List[SheetSide]:
    positions = _template_positions(template, default)
    return [
        SheetSide(0, side, [Slot.from_position(p) for p in _by_side(positions, side)])
        for side in (Side.FRONT, Side.BACK)
    ]


def _resolve_quarter_fold(template: Template, page_count: int) -> List[SheetSide]:
    # Слит-зин печатается на одной стороне листа
    return _single_side(template, page_count, quarter_fold_positions)


def _resolve_accordion(template: Template, page_count: int) -> List[SheetSide]:
    return _single_side(template, page_count, accordion_positions)


def _resolve_half_fold(template: Template, page_count: int) -> List[SheetSide]:
    return _double_side(template, page_count, half_fold_positions)


def _resolve_tri_fold(template: Template, page_count: int) -> List[SheetSide]:
    return _double_side(template, page_count, tri_fold_positions)


def _resolve_booklet(template: Template, page_count: int) -> List[SheetSide]:
    width = template.print_layout.sheet_width
    height = template.print_layout.sheet_height
    half = width / 2
    total = page_count
    sheets = math.ceil(page_count / 4)

    sides = []
    for i in range(sheets):
        front = (total - 2 * i, 1 + 2 * i)
        back = (2 + 2 * i, total - 1 - 2 * i)
        for side, (left, right) in ((Side.FRONT, front), (Side.BACK, back)):
            sides.append(SheetSide(i, side, [
                Slot(left, 0, 0, half, height),
                Slot(right, half, 0, half, height),
            ]))
    return sides


def _resolve_flipbook(template: Template, page_count: int) -> List[SheetSide]:
    positions = _template_positions(template, flipbook_positions)
    front = _by_side(positions, Side.FRONT)
    back = _by_side(positions, Side.BACK)
    if len(front) < 2 or len(back) < 2:
        defaults = flipbook_positions(template.print_layout.sheet_width,
                                      template.print_layout.sheet_height)
        front = front if len(front) >= 2 else _by_side(defaults, Side.FRONT)
        back = back if len(back) >= 2 else _by_side(defaults, Side.BACK)

    sides = []
    for i in range(math.ceil(page_count / 2)):
        front_slots = [
            Slot.from_position(front[0], 2 * i + 2),
            Slot.from_position(front[1], 2 * i + 1),
        ]
        back_slots = [
            Slot.from_position(back[0], 2 * i + 3),
            Slot.from_position(back[1], 2 * i + 4),
        ]
        front_slots = [s for s in front_slots if s.page_number <= page_count]
        back_slots = [s for s in back_slots if s.page_number <= page_count]

        sides.append(SheetSide(i, Side.FRONT, front_slots))
        if back_slots:
            sides.append(SheetSide(i, Side.BACK, back_slots))
    return sides


_RESOLVERS: Dict[ZineFormat, Callable[[Template, int], List[SheetSide]]] = {
    ZineFormat.QUARTER_FOLD: _resolve_quarter_fold,
    ZineFormat.HALF_FOLD: _resolve_half_fold,
    ZineFormat.TRI_FOLD: _resolve_tri_fold,
    ZineFormat.ACCORDION: _resolve_accordion,
    ZineFormat.BOOKLET: _resolve_booklet,
    ZineFormat.FLIPBOOK: _resolve_flipbook,
}


def supported_formats() -> List[ZineFormat]:
    return list(_RESOLVERS)


def resolve(template: Template, page_count: int) -> List[SheetSide]:
    """
    Раскладка страниц по сторонам листов.

    Возвращает стороны в порядке печати: листы по возрастанию индекса,
    лицевая сторона перед оборотной.
    """
    try:
        zine_format = ZineFormat(template.format)
    except ValueError:
        logger.error(f"Нет правила импозиции для формата {template.format!r}")
        raise UnknownFormatError(template.format) from None

    sides = _RESOLVERS[zine_format](template, page_count)
    logger.debug(f"Раскладка {zine_format.value}: {len(sides)} сторон, "
                 f"страницы {[s.page_numbers for s in sides]}")
    return sides
