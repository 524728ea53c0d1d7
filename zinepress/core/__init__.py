"""
Core module for zine imposition & export engine
"""

from .models import (
    ZineFormat, PageSize, Orientation, Side, ContentType,
    PagePosition, PrintLayout, PageCanvas, Template,
    TextProperties, ImageProperties, ShapeProperties, DrawingPath, DrawingProperties,
    Content, Page, ProjectMetadata, Project,
    Slot, SheetSide, ExportWarning, ExportResult
)
from .exceptions import (
    ZineExportError, UnknownFormatError, MissingTemplateError, AssetNotFoundError,
    AssetLoadFailedError, ExportOptionsError, DocumentAssemblyError, ProjectFormatError
)
from .config import ExportOptions, RenderConfig
from .templates import TemplateCatalog, default_catalog
from .layout_resolver import resolve
from .guides import GuideLine, generate_guides
from .compositor import ContentCompositor, compose_page
from .rasterizer import DrawingBackend, PillowBackend, SheetRasterizer
from .document_assembler import assemble_document
from .exporter import ZineExporter, export_project, export_project_sync
from .serialization import (
    project_to_dict, project_from_dict, dumps_project, loads_project,
    save_project_file, load_project_file
)

__all__ = [
    'ZineFormat', 'PageSize', 'Orientation', 'Side', 'ContentType',
    'PagePosition', 'PrintLayout', 'PageCanvas', 'Template',
    'TextProperties', 'ImageProperties', 'ShapeProperties', 'DrawingPath', 'DrawingProperties',
    'Content', 'Page', 'ProjectMetadata', 'Project',
    'Slot', 'SheetSide', 'ExportWarning', 'ExportResult',
    'ZineExportError', 'UnknownFormatError', 'MissingTemplateError', 'AssetNotFoundError',
    'AssetLoadFailedError', 'ExportOptionsError', 'DocumentAssemblyError', 'ProjectFormatError',
    'ExportOptions', 'RenderConfig',
    'TemplateCatalog', 'default_catalog',
    'resolve',
    'GuideLine', 'generate_guides',
    'ContentCompositor', 'compose_page',
    'DrawingBackend', 'PillowBackend', 'SheetRasterizer',
    'assemble_document',
    'ZineExporter', 'export_project', 'export_project_sync',
    'project_to_dict', 'project_from_dict', 'dumps_project', 'loads_project',
    'save_project_file', 'load_project_file'
]
