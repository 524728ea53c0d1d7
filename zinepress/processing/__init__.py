from .image_loader import decode_image, load_asset_image, load_image_source

__all__ = ['decode_image', 'load_asset_image', 'load_image_source']
