"""Conversion between PIL images and float sample arrays."""

from __future__ import annotations

import numpy as np
from PIL import Image

from .scene import ViewImageType

__all__ = ["image_to_sample", "tensor_into_image"]


def _has_alpha(image: Image.Image) -> bool:
    if "A" in image.getbands():
        return True
    return image.mode == "P" and "transparency" in image.info


def image_to_sample(image: Image.Image, img_type: ViewImageType) -> np.ndarray:
    """Convert an image to a float32 [H, W, C] array in [0, 1].

    Images with alpha give four channels; in ``ALPHA`` mode the colour is
    premultiplied by alpha, assuming the input is not.
    """
    if _has_alpha(image):
        rgba = np.asarray(image.convert("RGBA"), dtype=np.float32) / 255.0
        if img_type == ViewImageType.ALPHA:
            rgba[..., :3] *= rgba[..., 3:4]
        return rgba
    return np.asarray(image.convert("RGB"), dtype=np.float32) / 255.0


def tensor_into_image(data) -> Image.Image:
    """Turn a float32 [H, W, 3|4] array into an 8-bit RGB or RGBA image."""
    arr = np.asarray(data)
    if arr.ndim != 3:
        raise ValueError(f"expected an [H, W, C] array, got shape {arr.shape}")
    if arr.dtype != np.float32:
        raise ValueError(f"unsupported dtype {arr.dtype}")
    channels = arr.shape[2]
    if channels not in (3, 4):
        raise ValueError(f"Unsupported number of channels: {channels}")
    pixels = np.round(np.clip(np.nan_to_num(arr), 0.0, 1.0) * 255.0).astype(np.uint8)
    return Image.fromarray(np.ascontiguousarray(pixels))