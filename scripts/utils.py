"""Utility functions: metrics and IO helpers."""
from pathlib import Path

import numpy as np
from skimage.color import gray2rgb
from skimage.io import imread, imsave
from skimage.metrics import peak_signal_noise_ratio, structural_similarity


class ImageLoadError(OSError):
    """Input image is missing or cannot be decoded."""


class ImageSaveError(OSError):
    """Output image cannot be encoded or written."""


def load_image(path) -> np.ndarray:
    """Read an image as an (H, W, 3) or (H, W, 4) array.

    Grayscale inputs are expanded to RGB and gray+alpha to RGBA so the
    impulse denoiser always sees colour samples. The file's dtype is kept.
    """
    path = Path(path)
    if not path.is_file():
        raise ImageLoadError(f"Input image not found: {path}")
    try:
        img = imread(str(path))
    except Exception as exc:
        raise ImageLoadError(f"Cannot decode {path}: {exc}") from exc

    img = np.asarray(img)
    if img.ndim == 2:
        return gray2rgb(img)
    if img.ndim == 3 and img.shape[2] == 2:
        gray, alpha = img[:, :, 0], img[:, :, 1]
        return np.dstack([gray, gray, gray, alpha])
    if img.ndim != 3 or img.shape[2] not in (3, 4):
        raise ImageLoadError(f"Unsupported image layout {img.shape} in {path}")
    return img


def _to_float(img):
    """Normalize image to [0,1] float for metric computation."""
    if np.issubdtype(img.dtype, np.integer):
        return img.astype(np.float64) / np.iinfo(img.dtype).max
    return img.astype(np.float64)


def _colour(img):
    # metrics compare colour channels only
    return img[:, :, :3] if img.ndim == 3 else img


def mse(a: np.ndarray, b: np.ndarray) -> float:
    a = _to_float(_colour(a))
    b = _to_float(_colour(b))
    return float(np.mean((a - b) ** 2))


def psnr(a: np.ndarray, b: np.ndarray) -> float:
    a = _to_float(_colour(a))
    b = _to_float(_colour(b))
    return float(peak_signal_noise_ratio(a, b, data_range=1.0))


def ssim(a: np.ndarray, b: np.ndarray) -> float:
    a = _to_float(_colour(a))
    b = _to_float(_colour(b))
    channel_axis = -1 if a.ndim == 3 else None
    return float(structural_similarity(a, b, data_range=1.0, channel_axis=channel_axis))


def compute_metrics(clean: np.ndarray, denoised: np.ndarray) -> dict:
    return {"mse": mse(clean, denoised), "psnr": psnr(clean, denoised), "ssim": ssim(clean, denoised)}


def save_image(img: np.ndarray, path):
    """Save image to file, keeping its dtype. Parent folders are created."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        imsave(str(path), img, check_contrast=False)
    except Exception as exc:
        raise ImageSaveError(f"Cannot write {path}: {exc}") from exc
