"""
Точка входа командной строки: экспорт проекта зина в PNG и PDF
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .core.config import ExportOptions
from .core.exceptions import ZineExportError
from .core.exporter import export_project
from .core.serialization import load_project_file
from .core.templates import default_catalog
from .services.asset_service import DirectoryAssetProvider, InMemoryAssetProvider
from .utils.helpers import sanitize_filename
from .utils.logger import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='zinepress', description='Импозиция и экспорт зинов')
    parser.add_argument('--log-dir', default=None, help='Директория для лог-файлов')
    parser.add_argument('-v', '--verbose', action='store_true', help='Подробный лог')
    sub = parser.add_subparsers(dest='command', required=True)

    export = sub.add_parser('export', help='Экспорт проекта в PNG и PDF')
    export.add_argument('project', help='JSON документ проекта')
    export.add_argument('-o', '--output', default='output', help='Директория результата')
    export.add_argument('--name', default=None, help='Базовое имя файлов')
    export.add_argument('--assets', default=None, help='Директория ассетов (файлы по id)')
    export.add_argument('--page-numbers', action='store_true', help='Номера страниц')
    export.add_argument('--fold-marks', action='store_true', help='Линии сгиба')
    export.add_argument('--cut-marks', action='store_true', help='Метки реза')
    export.add_argument('--pixel-ratio', type=float, default=2.0, help='Масштаб растра')

    sub.add_parser('templates', help='Список шаблонов')
    return parser


def _list_templates() -> int:
    for template in default_catalog.all():
        layout = template.print_layout
        print(f"{template.id:28} {template.format.value:13} {template.page_count:3} стр.  "
              f"{layout.sheet_width:g}x{layout.sheet_height:g} pt  {template.name}")
    return 0


def _export(args) -> int:
    project = load_project_file(args.project)
    assets = DirectoryAssetProvider(args.assets) if args.assets else InMemoryAssetProvider()
    options = ExportOptions(
        show_page_numbers=args.page_numbers,
        show_fold_marks=args.fold_marks,
        show_cut_marks=args.cut_marks,
        pixel_ratio=args.pixel_ratio
    )

    result = asyncio.run(export_project(project, assets, options))

    basename = sanitize_filename(args.name or project.name)
    written = result.save(Path(args.output), basename)
    for warning in result.warnings:
        print(f"⚠️ {warning}")
    print(f"✅ Сохранено файлов: {len(written)} в {args.output}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_dir, logging.DEBUG if args.verbose else logging.INFO)

    if args.command == 'templates':
        return _list_templates()

    try:
        return _export(args)
    except ZineExportError as e:
        logger.error(f"❌ Экспорт не выполнен: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
