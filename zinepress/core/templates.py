"""
Каталог шаблонов зинов
"""
import copy
import logging
from typing import Dict, List, Optional

from .layout_resolver import (
    accordion_positions, flipbook_positions, half_fold_positions,
    quarter_fold_positions, tri_fold_positions
)
from .models import (
    Orientation, PageCanvas, PageSize, PrintLayout, Template, ZineFormat
)

logger = logging.getLogger(__name__)

# US Letter при 72 DPI
LETTER_LONG = 792
LETTER_SHORT = 612


def _standard_templates() -> List[Template]:
    return [
        Template(
            id='quarter-fold-letter',
            name='Quarter Fold Zine (Letter)',
            format=ZineFormat.QUARTER_FOLD,
            page_size=PageSize.LETTER,
            orientation=Orientation.LANDSCAPE,
            page_count=8,
            description='Classic 8-page zine made from a single letter-size sheet',
            fold_instructions=('Fold in half hamburger-style, then in half again. Unfold once, '
                               'cut the center slit, then fold into a booklet.'),
            print_layout=PrintLayout(
                LETTER_LONG, LETTER_SHORT,
                quarter_fold_positions(LETTER_LONG, LETTER_SHORT)
            ),
            page_canvas=PageCanvas(LETTER_LONG / 4, LETTER_SHORT / 2)
        ),
        Template(
            id='half-fold-letter',
            name='Half Fold Zine (Letter)',
            format=ZineFormat.HALF_FOLD,
            page_size=PageSize.LETTER,
            orientation=Orientation.LANDSCAPE,
            page_count=4,
            description='Simple 4-page zine made from a single letter-size sheet folded in half',
            fold_instructions='Print double-sided, flipping on the long edge. Fold the sheet in half.',
            print_layout=PrintLayout(
                LETTER_LONG, LETTER_SHORT,
                half_fold_positions(LETTER_LONG, LETTER_SHORT)
            ),
            page_canvas=PageCanvas(LETTER_LONG / 2, LETTER_SHORT)
        ),
        Template(
            id='tri-fold-letter',
            name='Tri-Fold Pamphlet (Letter)',
            format=ZineFormat.TRI_FOLD,
            page_size=PageSize.LETTER,
            orientation=Orientation.LANDSCAPE,
            page_count=6,
            description='Six-panel pamphlet from one letter-size sheet folded in thirds',
            fold_instructions=('Print double-sided, flipping on the long edge. Fold the right panel in, '
                               'then fold the left panel over it.'),
            print_layout=PrintLayout(
                LETTER_LONG, LETTER_SHORT,
                tri_fold_positions(LETTER_LONG, LETTER_SHORT)
            ),
            page_canvas=PageCanvas(LETTER_LONG / 3, LETTER_SHORT)
        ),
        Template(
            id='accordion-16-letter',
            name='Accordion 16 (Letter)',
            format=ZineFormat.ACCORDION,
            page_size=PageSize.LETTER,
            orientation=Orientation.LANDSCAPE,
            page_count=16,
            description='16-page one-sheet accordion (single-sided) with three horizontal cuts.',
            fold_instructions=('Print single-sided. Cut along the three horizontal lines, '
                               'then accordion fold following the snake order.'),
            print_layout=PrintLayout(
                LETTER_SHORT, LETTER_LONG,
                accordion_positions(LETTER_SHORT, LETTER_LONG)
            ),
            page_canvas=PageCanvas(LETTER_SHORT / 4, LETTER_LONG / 4)
        ),
        Template(
            id='booklet-half-letter-20',
            name='Booklet (Half Letter, 20 pages)',
            format=ZineFormat.BOOKLET,
            page_size=PageSize.LETTER,
            orientation=Orientation.LANDSCAPE,
            page_count=20,
            description='Saddle-stitched half-letter booklet; front cover is page 1, back cover page 20.',
            fold_instructions='Print double-sided (flip on short edge). Fold and staple at the spine.',
            # Листы буклета рассчитываются по числу страниц проекта
            print_layout=PrintLayout(LETTER_LONG, LETTER_SHORT, []),
            page_canvas=PageCanvas(LETTER_LONG / 2, LETTER_SHORT)
        ),
        Template(
            id='flipbook-letter',
            name='Flipbook (Letter)',
            format=ZineFormat.FLIPBOOK,
            page_size=PageSize.LETTER,
            orientation=Orientation.LANDSCAPE,
            page_count=8,
            description='Two pages per side; stack the cut halves to flip through.',
            fold_instructions='Print double-sided (flip on long edge). Cut each sheet in half and stack in order.',
            print_layout=PrintLayout(
                LETTER_LONG, LETTER_SHORT,
                flipbook_positions(LETTER_LONG, LETTER_SHORT)
            ),
            page_canvas=PageCanvas(LETTER_LONG / 2, LETTER_SHORT)
        ),
    ]


class TemplateCatalog:
    """Поставщик шаблонов: get_template(id) -> Template | None"""

    def __init__(self, templates: Optional[List[Template]] = None):
        if templates is None:
            templates = _standard_templates()
        self._templates: Dict[str, Template] = {t.id: t for t in templates}

    def get_template(self, template_id: str) -> Optional[Template]:
        template = self._templates.get(template_id)
        if template is None:
            logger.warning(f"Шаблон не найден в каталоге: {template_id}")
            return None
        # Шаблоны в каталоге только для чтения
        return copy.deepcopy(template)

    def get_templates_by_format(self, zine_format: ZineFormat) -> List[Template]:
        return [copy.deepcopy(t) for t in self._templates.values() if t.format == zine_format]

    def get_templates_by_page_size(self, page_size: PageSize) -> List[Template]:
        return [copy.deepcopy(t) for t in self._templates.values() if t.page_size == page_size]

    def all(self) -> List[Template]:
        return [copy.deepcopy(t) for t in self._templates.values()]

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._templates

    def __len__(self) -> int:
        return len(self._templates)


default_catalog = TemplateCatalog()
