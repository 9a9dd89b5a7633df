"""Brightness model shared by impulse detection and median selection.

Brightness is the plain sum of the red, green and blue channels (alpha is
ignored). It is a lossy ordering key: two different colours with the same
channel sum compare equal.
"""
import numpy as np


def validate_image(image: np.ndarray) -> None:
    """Raise ValueError unless `image` is a non-empty (H, W, 3|4) array."""
    if not isinstance(image, np.ndarray):
        raise ValueError("Expected a numpy array image.")
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(
            f"Unsupported image shape {image.shape}, expected (H, W, 3) or (H, W, 4).")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ValueError("Image has no pixels.")


def brightness_of(sample) -> int:
    """Return the R+G+B sum of a single pixel.

    Integer samples are summed as Python ints, so 16-bit channels never
    overflow.
    """
    r, g, b = sample[0], sample[1], sample[2]
    if isinstance(r, (np.floating, float)):
        return float(r) + float(g) + float(b)
    return int(r) + int(g) + int(b)


def _accumulator_dtype(dtype: np.dtype):
    if np.issubdtype(dtype, np.unsignedinteger) or dtype == np.bool_:
        return np.uint64
    if np.issubdtype(dtype, np.integer):
        return np.int64
    return np.float64


def brightness_map(image: np.ndarray) -> np.ndarray:
    """Brightness of every pixel as an (H, W) array in a 64-bit dtype."""
    validate_image(image)
    return image[:, :, :3].sum(axis=2, dtype=_accumulator_dtype(image.dtype))
