# tests/test_document_assembler.py
import unittest
import sys
import os
from io import BytesIO

from PIL import Image
from PyPDF2 import PdfReader

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from zinepress.core.document_assembler import assemble_document, page_size, sheet_orientation
from zinepress.core.exceptions import DocumentAssemblyError
from zinepress.core.models import Orientation


def _sides(count, size=(396, 306)):
    return [Image.new('RGB', size, color) for color in ('white', 'red', 'blue')[:count]]


class TestDocumentAssembler(unittest.TestCase):

    def test_landscape_sheet(self):
        """Одна страница PDF на каждую сторону, размер = физический лист"""
        data = assemble_document(_sides(2), 792, 612)
        reader = PdfReader(BytesIO(data))

        self.assertEqual(len(reader.pages), 2)
        for page in reader.pages:
            self.assertAlmostEqual(float(page.mediabox.width), 792, places=2)
            self.assertAlmostEqual(float(page.mediabox.height), 612, places=2)

    def test_portrait_sheet(self):
        data = assemble_document(_sides(1, (306, 396)), 612, 792)
        page = PdfReader(BytesIO(data)).pages[0]
        self.assertAlmostEqual(float(page.mediabox.width), 612, places=2)
        self.assertAlmostEqual(float(page.mediabox.height), 792, places=2)

    def test_pixel_size_does_not_change_page_size(self):
        """Плотность растра влияет на качество, но не на размер страницы"""
        small = PdfReader(BytesIO(assemble_document(_sides(1, (100, 77)), 792, 612)))
        large = PdfReader(BytesIO(assemble_document(_sides(1, (1584, 1224)), 792, 612)))
        self.assertEqual(small.pages[0].mediabox.width, large.pages[0].mediabox.width)

    def test_metadata(self):
        data = assemble_document(_sides(1), 792, 612, title='My Zine', author='Robin')
        metadata = PdfReader(BytesIO(data)).metadata
        self.assertEqual(metadata.title, 'My Zine')
        self.assertEqual(metadata.author, 'Robin')

    def test_empty_input(self):
        with self.assertRaises(DocumentAssemblyError):
            assemble_document([], 792, 612)

    def test_orientation(self):
        self.assertEqual(sheet_orientation(792, 612), Orientation.LANDSCAPE)
        self.assertEqual(sheet_orientation(612, 792), Orientation.PORTRAIT)
        self.assertEqual(sheet_orientation(612, 612), Orientation.PORTRAIT)
        self.assertEqual(page_size(792, 612), (792, 612))
        self.assertEqual(page_size(612, 792), (612, 792))


if __name__ == '__main__':
    unittest.main()
