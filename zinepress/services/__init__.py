from .asset_service import DirectoryAssetProvider, InMemoryAssetProvider

__all__ = ['DirectoryAssetProvider', 'InMemoryAssetProvider']
