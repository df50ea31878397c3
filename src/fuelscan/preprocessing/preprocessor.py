"""
Image preprocessing for digit recognition.

Turns an arbitrary photo into a high-contrast grayscale RGBA bitmap:
- Luminance: Y = 0.299R + 0.587G + 0.114B
- Contrast stretch around the mid-point: Y' = clamp((Y - 128) * 1.35 + 128, 0, 255)
- Y' is written to R, G and B; alpha is left untouched

No resizing or rotation correction is performed.
"""

import io
import logging
from dataclasses import dataclass

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

CONTRAST_MIDPOINT = 128.0
CONTRAST_GAIN = 1.35


class ImageLoadError(Exception):
    """Input bytes could not be decoded as an image."""

    pass


@dataclass
class Bitmap:
    """Decoded RGBA pixel buffer, shaped (height, width, 4)."""

    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def from_image(cls, image: Image.Image) -> "Bitmap":
        """Copy a Pillow image into an owned RGBA buffer."""
        rgba = image.convert("RGBA")
        pixels = np.array(rgba, dtype=np.uint8)
        return cls(width=rgba.width, height=rgba.height, pixels=pixels)

    def to_image(self) -> Image.Image:
        """View the buffer as a Pillow RGBA image (for the recognition engine)."""
        if self.released:
            raise ValueError("Bitmap has been released")
        return Image.fromarray(self.pixels)

    @property
    def released(self) -> bool:
        return self.pixels.size == 0

    def release(self) -> None:
        """Drop the pixel buffer once recognition has consumed it."""
        self.pixels = np.empty((0, 0, 4), dtype=np.uint8)


def contrast_stretch(luminance):
    """
    Linear contrast stretch around the mid-point, clamped to [0, 255].

    Accepts a scalar or a numpy array. 128 is a fixed point.
    """
    return np.clip((luminance - CONTRAST_MIDPOINT) * CONTRAST_GAIN + CONTRAST_MIDPOINT, 0, 255)


def preprocess(image_bytes: bytes) -> Bitmap:
    """
    Decode an image and produce the normalized bitmap used for recognition.

    Args:
        image_bytes: Raw file content in any container Pillow can decode

    Returns:
        Grayscale, contrast-stretched RGBA Bitmap

    Raises:
        ImageLoadError: If the bytes cannot be decoded as an image
    """
    if not image_bytes:
        raise ImageLoadError("Image could not be loaded: no data")

    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            bitmap = Bitmap.from_image(image)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        raise ImageLoadError(f"Image could not be loaded: {e}") from e

    logger.debug(f"Decoded image {bitmap.width}x{bitmap.height}")

    rgb = bitmap.pixels[..., :3].astype(np.float64)
    stretched = contrast_stretch(rgb @ LUMA_WEIGHTS)
    gray = np.rint(stretched).astype(np.uint8)

    bitmap.pixels[..., 0] = gray
    bitmap.pixels[..., 1] = gray
    bitmap.pixels[..., 2] = gray

    return bitmap
