# tests/test_config.py
import unittest
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from zinepress.core.config import ExportOptions, RenderConfig
from zinepress.core.exceptions import ExportOptionsError
from zinepress.utils.helpers import dash_segments, parse_color, rotate_point, sanitize_filename


class TestExportOptions(unittest.TestCase):

    def test_defaults(self):
        options = ExportOptions()
        self.assertFalse(options.show_page_numbers)
        self.assertFalse(options.show_fold_marks)
        self.assertFalse(options.show_cut_marks)
        self.assertEqual(options.pixel_ratio, 2.0)
        self.assertIs(options.validate(), options)

    def test_validation(self):
        """Неположительный масштаб и отрицательный вылет отклоняются"""
        for kwargs in ({'pixel_ratio': 0}, {'pixel_ratio': -1}, {'pixel_ratio': 'x'},
                       {'bleed': -3}):
            with self.subTest(**kwargs):
                with self.assertRaises(ExportOptionsError):
                    ExportOptions(**kwargs).validate()

    def test_from_dict(self):
        """Ключи редактора и имена полей"""
        options = ExportOptions.from_dict({
            'showFoldMarks': True, 'show_cut_marks': True, 'pixelRatio': 3, 'theme': 'dark'
        })
        self.assertTrue(options.show_fold_marks)
        self.assertTrue(options.show_cut_marks)
        self.assertEqual(options.pixel_ratio, 3)

    def test_to_dict(self):
        data = ExportOptions(show_page_numbers=True).to_dict()
        self.assertEqual(data['showPageNumbers'], True)
        self.assertEqual(data['pixelRatio'], 2.0)
        self.assertEqual(ExportOptions.from_dict(data), ExportOptions(show_page_numbers=True))

    def test_render_config_defaults(self):
        config = RenderConfig()
        self.assertEqual(config.fold_color, '#9ca3af')
        self.assertEqual(tuple(config.fold_dash), (6, 4))
        self.assertIsNot(RenderConfig().fallback_fonts, config.fallback_fonts)


class TestHelpers(unittest.TestCase):

    def test_parse_color(self):
        self.assertEqual(parse_color('#ff0000'), (255, 0, 0, 255))
        self.assertEqual(parse_color('rgba(0, 0, 255, 0.5)'), (0, 0, 255, 128))
        self.assertIsNone(parse_color('transparent'))
        self.assertIsNone(parse_color(None))
        self.assertEqual(parse_color('not-a-color'), (0, 0, 0, 255))

    def test_dash_segments(self):
        segments = dash_segments([(0, 0), (20, 0)], [6, 4])
        rounded = [tuple((round(x, 6), round(y, 6)) for x, y in seg) for seg in segments]
        self.assertEqual(rounded, [((0, 0), (6, 0)), ((10, 0), (16, 0))])

    def test_rotate_point_clockwise(self):
        """Ось Y вниз: 90 градусов переводит (1, 0) в (0, 1)"""
        x, y = rotate_point(1, 0, 90)
        self.assertAlmostEqual(x, 0)
        self.assertAlmostEqual(y, 1)
        self.assertEqual(rotate_point(3, 4, 360), (3, 4))

    def test_sanitize_filename(self):
        self.assertEqual(sanitize_filename('My: Zine?'), 'My_ Zine_')
        self.assertEqual(sanitize_filename('   '), 'zine')


if __name__ == '__main__':
    unittest.main()
