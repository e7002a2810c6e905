from pathlib import Path

import cv2
import numpy as np
import pytest

from data_classes.data_classes import Config

IMAGE_SHAPE = (240, 320)


def make_scene(seed: int = 0, shape: tuple = IMAGE_SHAPE) -> np.ndarray:
    """Grayscale image of random filled rectangles: plenty of corners and blobs."""
    rng = np.random.default_rng(seed)
    h, w = shape
    img = np.full(shape, 30, dtype=np.uint8)
    for _ in range(40):
        x = int(rng.integers(20, w - 60))
        y = int(rng.integers(20, h - 60))
        rw, rh = (int(v) for v in rng.integers(10, 40, size=2))
        cv2.rectangle(img, (x, y), (x + rw, y + rh), int(rng.integers(80, 255)), -1)
    return cv2.GaussianBlur(img, (3, 3), 0)


def shift(image: np.ndarray, dx: float, dy: float) -> np.ndarray:
    m = np.float32([[1, 0, dx], [0, 1, dy]])
    return cv2.warpAffine(image, m, (image.shape[1], image.shape[0]), borderValue=30)


@pytest.fixture
def scene() -> np.ndarray:
    return make_scene()


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Three-frame sequence img_0000.png .. img_0002.png, camera drifting right."""
    folder = tmp_path / "images"
    folder.mkdir()
    base = make_scene()
    for i in range(3):
        frame = cv2.cvtColor(shift(base, 2 * i, 0), cv2.COLOR_GRAY2BGR)
        cv2.imwrite(str(folder / f"img_{i:04d}.png"), frame)
    return folder


@pytest.fixture
def make_config(image_dir: Path, tmp_path: Path):
    def _make(**overrides) -> Config:
        params = dict(
            img_base_path=f"{image_dir}/",
            img_prefix="img_",
            img_file_type=".png",
            img_start_index=0,
            img_end_index=1,
            img_fill_width=4,
            roi=(20, 20, 280, 200),
            output_path=str(tmp_path / "results" / "data.csv"),
            device="cpu",
        )
        params.update(overrides)
        return Config(**params)
    return _make
