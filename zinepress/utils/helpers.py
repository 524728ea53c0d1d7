# utils/helpers.py
import re
import math
import logging
from typing import List, Optional, Sequence, Tuple

from PIL import ImageColor

logger = logging.getLogger(__name__)

_RGBA_CSS = re.compile(
    r"rgba\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*([0-9.]+)\s*\)$", re.IGNORECASE
)


def sanitize_filename(filename: str) -> str:
    """Очистка имени файла от недопустимых символов"""
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        filename = filename.replace(char, '_')
    return filename.strip() or 'zine'


def parse_color(color: Optional[str], default=(0, 0, 0, 255)) -> Optional[Tuple[int, int, int, int]]:
    """Цвет CSS/редактора -> RGBA. None и 'transparent' дают None"""
    if color is None:
        return None
    value = color.strip()
    if not value or value.lower() in ('transparent', 'none'):
        return None

    match = _RGBA_CSS.match(value)
    if match:
        r, g, b = (int(match.group(i)) for i in (1, 2, 3))
        alpha = float(match.group(4))
        # CSS альфа 0..1, Pillow 0..255
        a = round(alpha * 255) if alpha <= 1 else int(alpha)
        return r, g, b, max(0, min(255, a))

    try:
        rgb = ImageColor.getrgb(value)
    except ValueError:
        logger.warning(f"Неизвестный цвет {color!r}, используется {default}")
        return default
    if len(rgb) == 3:
        return rgb[0], rgb[1], rgb[2], 255
    return rgb


def dash_segments(points: Sequence[Tuple[float, float]],
                  dash: Sequence[float]) -> List[Tuple[Tuple[float, float], Tuple[float, float]]]:
    """Разбивка ломаной на штрихи по шаблону [штрих, пробел, ...]"""
    pattern = [d for d in dash if d > 0]
    if not pattern or len(points) < 2:
        return [(points[i], points[i + 1]) for i in range(len(points) - 1)]

    segments = []
    idx = 0
    remaining = pattern[0]
    drawing = True
    for (x1, y1), (x2, y2) in zip(points, points[1:]):
        length = math.hypot(x2 - x1, y2 - y1)
        pos = 0.0
        while pos < length:
            step = min(remaining, length - pos)
            if drawing:
                t1 = pos / length
                t2 = (pos + step) / length
                segments.append((
                    (x1 + (x2 - x1) * t1, y1 + (y2 - y1) * t1),
                    (x1 + (x2 - x1) * t2, y1 + (y2 - y1) * t2),
                ))
            pos += step
            remaining -= step
            if remaining <= 1e-9:
                idx = (idx + 1) % len(pattern)
                remaining = pattern[idx]
                drawing = not drawing if len(pattern) > 1 else True
    return segments


def spline_points(points: Sequence[Tuple[float, float]], tension: float,
                  steps: int = 8) -> List[Tuple[float, float]]:
    """Сглаживание ломаной кардинальным сплайном с заданным натяжением"""
    if tension <= 0 or len(points) < 3:
        return list(points)

    result = [points[0]]
    count = len(points)
    for i in range(count - 1):
        p0 = points[i - 1] if i > 0 else points[i]
        p1 = points[i]
        p2 = points[i + 1]
        p3 = points[i + 2] if i + 2 < count else points[i + 1]

        m1 = (tension * (p2[0] - p0[0]), tension * (p2[1] - p0[1]))
        m2 = (tension * (p3[0] - p1[0]), tension * (p3[1] - p1[1]))

        for step in range(1, steps + 1):
            t = step / steps
            t2 = t * t
            t3 = t2 * t
            h00 = 2 * t3 - 3 * t2 + 1
            h10 = t3 - 2 * t2 + t
            h01 = -2 * t3 + 3 * t2
            h11 = t3 - t2
            result.append((
                h00 * p1[0] + h10 * m1[0] + h01 * p2[0] + h11 * m2[0],
                h00 * p1[1] + h10 * m1[1] + h01 * p2[1] + h11 * m2[1],
            ))
    return result


def rotate_point(x: float, y: float, degrees: float) -> Tuple[float, float]:
    """Поворот по часовой стрелке в экранных координатах (ось Y вниз)"""
    if degrees % 360 == 0:
        return x, y
    rad = math.radians(degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    return x * cos_a - y * sin_a, x * sin_a + y * cos_a
