"""Adaptive impulse (salt-and-pepper) denoiser.

Only corrupted pixels are touched. A pixel is corrupted ("dirty") when its
brightness equals the brightest (salt) or darkest (pepper) brightness found
anywhere in the image. Each dirty pixel is replaced by the median-brightness
clean sample found on the smallest square ring around it that contains one.

All lookups go against the original image, so no reconstructed value ever
feeds into another reconstruction.
"""
from typing import Iterator, List, NamedTuple, Tuple

import numpy as np

from denoisers.brightness import brightness_map, brightness_of, validate_image


class Thresholds(NamedTuple):
    salt: int
    pepper: int


class CleanupStats(NamedTuple):
    salt: int
    pepper: int
    dirty_pixels: int
    total_pixels: int


class NoReferencePixelError(RuntimeError):
    """No clean pixel is reachable from a dirty pixel."""

    def __init__(self, x: int, y: int, message: str = None):
        self.x = x
        self.y = y
        super().__init__(
            message or f"No clean reference pixel found for dirty pixel ({x}, {y}).")


def classify(image: np.ndarray) -> Thresholds:
    """Return the (salt, pepper) thresholds: max and min brightness of the image."""
    bright = brightness_map(image)
    return Thresholds(salt=bright.max().item(), pepper=bright.min().item())


def is_dirty(sample, thresholds: Thresholds) -> bool:
    b = brightness_of(sample)
    return b == thresholds.salt or b == thresholds.pepper


def dirty_mask(image: np.ndarray, thresholds: Thresholds) -> np.ndarray:
    """Boolean (H, W) mask of dirty pixels."""
    bright = brightness_map(image)
    return (bright == thresholds.salt) | (bright == thresholds.pepper)


def ring_coordinates(x: int, y: int, radius: int) -> Iterator[Tuple[int, int]]:
    """Yield the (x, y) coordinates visited on ring `radius` around (x, y).

    Rows are half-open on the right, columns skip the rows already covered
    and stop one short of the bottom row, so a few ring cells (the right-hand
    corners and the cell above the bottom-right corner) are never visited.
    """
    r = radius
    for i in range(x - r, x + r):
        yield i, y - r
    for i in range(x - r, x + r):
        yield i, y + r
    for j in range(y - r + 1, y + r - 1):
        yield x - r, j
    for j in range(y - r + 1, y + r - 1):
        yield x + r, j


def collect_ring(image: np.ndarray, thresholds: Thresholds, x: int, y: int, radius: int,
                 mask: np.ndarray = None) -> list:
    """Clean, in-bounds samples on one ring around (x, y).

    `mask` is a precomputed dirty_mask for the same thresholds; without it
    each neighbour is classified on the fly.
    """
    height, width = image.shape[:2]
    samples = []
    for i, j in ring_coordinates(x, y, radius):
        # numpy would silently wrap negative indices
        if i < 0 or i >= width or j < 0 or j >= height:
            continue
        sample = image[j, i]
        dirty = mask[j, i] if mask is not None else is_dirty(sample, thresholds)
        if not dirty:
            samples.append(sample)
    return samples


def median_sample(candidates: list):
    """Return the upper-middle sample of `candidates` ordered by brightness."""
    if not candidates:
        raise ValueError("Cannot take the median of an empty candidate list.")
    ordered = sorted(candidates, key=brightness_of)
    return ordered[len(ordered) // 2]


def reconstruct(image: np.ndarray, thresholds: Thresholds, x: int, y: int,
                mask: np.ndarray = None):
    """Estimate a replacement sample for the dirty pixel at (x, y).

    Rings of growing radius are scanned until at least one clean sample has
    been collected. Past radius max(W, H) - 1 no ring cell lies inside the
    image, so reaching it without a candidate raises NoReferencePixelError.
    """
    height, width = image.shape[:2]
    candidates: List[np.ndarray] = []
    for radius in range(1, max(width, height)):
        candidates = candidates + collect_ring(image, thresholds, x, y, radius, mask)
        if candidates:
            return median_sample(candidates).copy()
    raise NoReferencePixelError(x, y)


def clean_image(image: np.ndarray) -> np.ndarray:
    """Return a new image with every salt or pepper pixel reconstructed."""
    cleaned, _ = _clean(image)
    return cleaned


def _clean(image: np.ndarray) -> Tuple[np.ndarray, CleanupStats]:
    validate_image(image)
    thresholds = classify(image)
    mask = dirty_mask(image, thresholds)
    total = int(mask.size)
    dirty = int(mask.sum())

    if dirty == total:
        raise NoReferencePixelError(
            0, 0, f"Every pixel has brightness {thresholds.salt} or {thresholds.pepper}; "
            "the image has no clean reference pixel.")

    out = image.copy()
    for y, x in np.argwhere(mask):
        out[y, x] = reconstruct(image, thresholds, int(x), int(y), mask)

    return out, CleanupStats(thresholds.salt, thresholds.pepper, dirty, total)


def denoise(image: np.ndarray, return_stats: bool = False):
    """Remove impulse noise from an RGB or RGBA image.

    Parameters
    ----------
    image: np.ndarray
        Colour image of shape (H, W, 3) or (H, W, 4), any numeric dtype
    return_stats: bool
        Also return a CleanupStats tuple

    Returns
    -------
    np.ndarray or (np.ndarray, CleanupStats)
        Cleaned image with the same shape and dtype as the input
    """
    cleaned, stats = _clean(image)
    if return_stats:
        return cleaned, stats
    return cleaned
