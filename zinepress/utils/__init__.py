from .helpers import dash_segments, parse_color, rotate_point, sanitize_filename, spline_points
from .logger import setup_logging

__all__ = [
    'dash_segments',
    'parse_color',
    'rotate_point',
    'sanitize_filename',
    'spline_points',
    'setup_logging'
]
