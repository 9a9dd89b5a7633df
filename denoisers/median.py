"""Plain median filter baseline.

Filters every pixel, corrupted or not, channel by channel. Kept as the
reference point the impulse denoiser is compared against.
"""
import numpy as np
from scipy.ndimage import median_filter


def denoise(image: np.ndarray, size: int = 3) -> np.ndarray:
    """Apply a channel-wise median filter.

    Parameters
    ----------
    image: np.ndarray
        Colour image (H, W, C) or grayscale (H, W), any dtype
    size: int
        Neighborhood size (odd integer recommended, e.g., 3, 5, 7)

    Returns
    -------
    np.ndarray
        Filtered image, same shape and dtype as the input
    """
    if image is None or image.size == 0:
        raise ValueError("Empty image.")

    if image.ndim == 2:
        return median_filter(image, size=size)

    out = np.empty_like(image)
    for c in range(image.shape[2]):
        out[:, :, c] = median_filter(image[:, :, c], size=size)
    if image.shape[2] == 4:
        # alpha is not noise
        out[:, :, 3] = image[:, :, 3]
    return out
