"""
Image preprocessing.

Provides:
- Bitmap: owned, transient RGBA buffer
- preprocess: decode + grayscale + contrast stretch
- ImageLoadError: undecodable input
"""

from .preprocessor import Bitmap, ImageLoadError, contrast_stretch, preprocess

__all__ = [
    "Bitmap",
    "ImageLoadError",
    "contrast_stretch",
    "preprocess",
]
