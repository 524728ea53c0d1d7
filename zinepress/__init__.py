"""
zinepress - импозиция и экспорт зинов в печатные листы и PDF
"""

__version__ = "1.0.0"

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .services import DirectoryAssetProvider, InMemoryAssetProvider

__all__ = list(_core_all) + ['DirectoryAssetProvider', 'InMemoryAssetProvider', '__version__']
