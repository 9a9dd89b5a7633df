"""Synthetic colour dataset with impulse noise.

`generate_demo_dataset` returns a list of dicts with keys:
- name: str
- clean: numpy array (uint8, H x W x 3)
- noisy: numpy array (uint8, H x W x 3)
- noise_type: str

Nothing is written to disk here; `main.py` handles saving.
"""
from skimage import data
import numpy as np


def add_salt_pepper(image, amount=0.05, salt_vs_pepper=0.5, seed=0):
    """Force a fraction of pixels to the dtype's extreme values.

    Colour channels of the chosen pixels are set to the maximum (salt) or
    minimum (pepper) value of the dtype; an alpha channel is left alone.
    """
    rng = np.random.RandomState(seed)
    out = image.copy()
    if np.issubdtype(image.dtype, np.integer):
        lo, hi = np.iinfo(image.dtype).min, np.iinfo(image.dtype).max
    else:
        lo, hi = 0.0, 1.0

    h, w = image.shape[:2]
    num_pixels = int(amount * h * w)
    rows = rng.randint(0, h, num_pixels)
    cols = rng.randint(0, w, num_pixels)
    num_salt = int(round(num_pixels * salt_vs_pepper))

    colour = out[:, :, :3] if out.ndim == 3 else out
    colour[rows[:num_salt], cols[:num_salt]] = hi
    colour[rows[num_salt:], cols[num_salt:]] = lo
    return out


def _to_rgb_uint8(gray, low=32, high=224):
    """Map a [0, 1] pattern to RGB uint8 strictly inside (0, 255)."""
    scaled = np.round(low + gray * (high - low)).astype(np.uint8)
    tint = np.array([1.0, 0.9, 0.8])
    return np.round(scaled[:, :, None] * tint).astype(np.uint8)


def make_bars(size=128, num_bars=8):
    x = np.zeros((size, size), dtype=float)
    bar_w = max(size // (2 * num_bars), 1)
    for i in range(num_bars):
        start = i * 2 * bar_w
        x[:, start:start + bar_w] = 1.0
    # smooth ramp keeps the pattern away from a two-level image
    x = 0.15 + 0.7 * x * np.linspace(0.6, 1.0, size)[None, :]
    return _to_rgb_uint8(x)


def make_circles(size=128, num_circles=6):
    Y, X = np.ogrid[:size, :size]
    center = (size // 2, size // 2)
    R = np.sqrt((Y - center[0]) ** 2 + (X - center[1]) ** 2)
    img_c = np.full((size, size), 0.25)
    max_r = size // 2
    for i in range(num_circles):
        r0 = (i / num_circles) * max_r
        r1 = ((i + 0.5) / num_circles) * max_r
        img_c[(R >= r0) & (R < r1)] = 0.9 if i % 2 == 0 else 0.5
    return _to_rgb_uint8(img_c)


def generate_demo_dataset(amount=0.05, seed=0, include_astronaut=True, size=128):
    """Return a small dataset list of dicts with clean and noisy images.

    Parameters
    ----------
    amount: float
        Fraction of pixels hit by impulse noise
    seed: int
        Base random seed; each image gets its own offset
    include_astronaut: bool
        Add the scikit-image astronaut picture (512x512, slower to clean)
    size: int
        Side length of the synthetic images

    Returns
    -------
    list of dict
    """
    cleans = [("bars", make_bars(size)), ("circles", make_circles(size))]
    if include_astronaut:
        cleans.insert(0, ("astronaut", data.astronaut()))

    dataset = []
    for offset, (name, clean) in enumerate(cleans):
        dataset.append({
            "name": f"{name}_sp",
            "clean": clean,
            "noisy": add_salt_pepper(clean, amount=amount, seed=seed + offset),
            "noise_type": "sp",
        })
    return dataset
