# tests/test_models.py
import tempfile
import unittest
import sys
import os
from pathlib import Path

from PIL import Image

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from fixtures import shape_content, text_content
from zinepress.core.models import (
    Content, ExportResult, ExportWarning, PagePosition, PageSize, Project, Side, Slot,
    ZineFormat
)
from zinepress.core.templates import TemplateCatalog, default_catalog


class TestProject(unittest.TestCase):

    def test_create_from_template(self):
        """Проект получает по странице на каждую страницу шаблона"""
        template = default_catalog.get_template('quarter-fold-letter')
        project = Project.create('Garden', template)

        self.assertEqual(len(project.pages), 8)
        self.assertEqual(project.pages[0].title, 'Front Cover')
        self.assertEqual(project.pages[3].title, 'Page 4')
        self.assertEqual(project.pages[-1].title, 'Back Cover')
        self.assertEqual(project.format_version, 2)
        self.assertEqual(project.created_at, project.modified_at)
        self.assertIsNotNone(project.created_at.tzinfo)

    def test_content_ids_are_unique(self):
        ids = {Content.new_id() for _ in range(50)}
        self.assertEqual(len(ids), 50)
        self.assertTrue(all(i.startswith('content-') for i in ids))

    def test_get_page(self):
        project = Project.create('Garden', default_catalog.get_template('half-fold-letter'))
        self.assertEqual(project.get_page(3).id, 'page-3')
        self.assertIsNone(project.get_page(9))

    def test_content_order(self):
        """Одинаковый z-index сохраняет порядок добавления"""
        page = Project.create('x', default_catalog.get_template('half-fold-letter')).pages[0]
        page.add_content(shape_content(content_id='a', z_index=1))
        page.add_content(text_content(content_id='b', z_index=0))
        page.add_content(shape_content(content_id='c', z_index=1))
        self.assertEqual([c.id for c in page.content], ['b', 'a', 'c'])

        page.reorder_content(['c', 'a', 'b'])
        self.assertEqual([c.id for c in page.content], ['c', 'a', 'b'])
        self.assertEqual([c.z_index for c in page.content], [0, 1, 2])


class TestLayoutTypes(unittest.TestCase):

    def test_slot_from_position(self):
        position = PagePosition(3, 10, 20, 100, 200, rotation=180, is_flipped=True,
                                side=Side.BACK)
        slot = Slot.from_position(position)
        self.assertEqual(slot, Slot(3, 10, 20, 100, 200, 180, True))
        self.assertEqual(Slot.from_position(position, 7).page_number, 7)

    def test_warning_text(self):
        warning = ExportWarning('AssetNotFound', 'Ассет не найден', 2, 'img-1')
        self.assertEqual(str(warning), '[AssetNotFound] стр. 2: Ассет не найден')

    def test_export_result_save(self):
        result = ExportResult(images=[Image.new('RGB', (4, 4))], document=b'%PDF-1.4',
                              width=4, height=4)
        with tempfile.TemporaryDirectory() as tmp:
            written = result.save(Path(tmp) / 'out')
            self.assertEqual([p.name for p in written], ['zine-1.png', 'zine.pdf'])
            self.assertEqual(written[-1].read_bytes(), b'%PDF-1.4')


class TestTemplateCatalog(unittest.TestCase):

    def test_catalog_contents(self):
        self.assertIn('quarter-fold-letter', default_catalog)
        self.assertEqual(len(default_catalog), 6)
        formats = {t.format for t in default_catalog.all()}
        self.assertEqual(formats, set(ZineFormat))

    def test_templates_are_copies(self):
        """Изменение полученного шаблона не затрагивает каталог"""
        template = default_catalog.get_template('half-fold-letter')
        template.print_layout.page_positions.clear()
        again = default_catalog.get_template('half-fold-letter')
        self.assertEqual(len(again.print_layout.page_positions), 4)

    def test_lookup(self):
        self.assertIsNone(default_catalog.get_template('missing'))
        booklets = default_catalog.get_templates_by_format(ZineFormat.BOOKLET)
        self.assertEqual([t.id for t in booklets], ['booklet-half-letter-20'])
        self.assertEqual(len(TemplateCatalog([])), 0)
        letter = default_catalog.get_templates_by_page_size(PageSize.LETTER)
        self.assertEqual(len(letter), 6)
        self.assertEqual(default_catalog.get_templates_by_page_size(PageSize.A4), [])


if __name__ == '__main__':
    unittest.main()
