# -*- coding: utf-8 -*-
# core/config.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
import logging

from .exceptions import ExportOptionsError

logger = logging.getLogger(__name__)

POINTS_PER_INCH = 72

# Ключи редактора (camelCase) -> поля ExportOptions
_OPTION_KEYS = {
    'showPageNumbers': 'show_page_numbers',
    'showFoldMarks': 'show_fold_marks',
    'showCutMarks': 'show_cut_marks',
    'pixelRatio': 'pixel_ratio',
    'bleed': 'bleed',
}


@dataclass
class ExportOptions:
    show_page_numbers: bool = False
    show_fold_marks: bool = False
    show_cut_marks: bool = False
    pixel_ratio: float = 2.0
    bleed: float = 0.0  # пункты (72 dpi), зарезервировано

    def validate(self) -> 'ExportOptions':
        if not isinstance(self.pixel_ratio, (int, float)) or self.pixel_ratio <= 0:
            raise ExportOptionsError(f"pixel_ratio должен быть > 0, получено {self.pixel_ratio!r}")
        if not isinstance(self.bleed, (int, float)) or self.bleed < 0:
            raise ExportOptionsError(f"bleed не может быть отрицательным, получено {self.bleed!r}")
        return self

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ExportOptions':
        kwargs = {}
        for key, value in data.items():
            name = _OPTION_KEYS.get(key, key)
            if name not in cls.__dataclass_fields__:
                logger.warning(f"Неизвестный параметр экспорта пропущен: {key}")
                continue
            kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, name) for key, name in _OPTION_KEYS.items()}


@dataclass
class RenderConfig:
    sheet_background: str = '#ffffff'
    blank_page_color: str = '#ffffff'

    fold_color: str = '#9ca3af'
    fold_dash: Tuple[float, float] = (6, 4)
    fold_width: float = 1.0

    cut_color: str = '#111827'
    cut_width: float = 1.0
    slit_width: float = 4.0
    notch_width: float = 3.0
    notch_size: float = 12.0
    crop_mark_margin: float = 18.0
    crop_mark_length: float = 24.0

    page_number_size: float = 12.0
    page_number_color: str = '#111827'
    page_number_offset: Tuple[float, float] = (20.0, 18.0)

    smoothing_tension: float = 0.5
    # Пауза после отрисовки перед снятием пикселей, секунды
    settle_delay: float = 0.04
    http_timeout: int = 30
    # Семейства, которые пробуются, если шрифт элемента не найден
    fallback_fonts: List[str] = field(default_factory=lambda: [
        'DejaVuSans', 'LiberationSans', 'Arial', 'Helvetica'
    ])
