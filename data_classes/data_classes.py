import json
from dataclasses import dataclass, field, fields
from pathlib import Path
import numpy as np

DEFAULT_DETECTORS = ('SHITOMASI', 'HARRIS', 'FAST', 'BRISK', 'ORB', 'SIFT', 'AKAZE')
DEFAULT_DESCRIPTORS = ('BRIEF', 'ORB', 'FREAK', 'SIFT', 'AKAZE')

CSV_HEADER = ('detect T', 't_detect', 'keypoints', 'descr T', 't_extract', 'matches', 't_match')


@dataclass
class Config:
    img_base_path: str = 'images/'
    img_prefix: str = 'KITTI/2011_09_26/image_00/data/000000'
    img_file_type: str = '.png'
    img_start_index: int = 0
    img_end_index: int = 9  # inclusive
    img_fill_width: int = 4
    buffer_size: int = 2
    roi: tuple = (535, 180, 180, 150)  # x, y, width, height
    focus_on_roi: bool = True
    max_keypoints: int = None
    detectors: tuple = DEFAULT_DETECTORS
    descriptors: tuple = DEFAULT_DESCRIPTORS
    matcher_type: str = 'MAT_BF'
    selector_type: str = 'SEL_KNN'
    output_path: str = 'results/data.csv'
    vis_dir: str = None
    device: str = 'cuda'

    @classmethod
    def from_json(cls, path: str, **overrides) -> 'Config':
        """Load a config file; keys that are not config fields are rejected"""
        with Path(path).open('r', encoding='utf-8') as f:
            raw = json.load(f)

        known = {f.name for f in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {sorted(unknown)}")

        raw.update({k: v for k, v in overrides.items() if v is not None})
        for key in ('roi', 'detectors', 'descriptors'):
            if key in raw:
                raw[key] = tuple(raw[key])
        return cls(**raw)


@dataclass
class Frame:
    image: np.ndarray  # (H, W) grayscale
    idx: int
    path: str = None
    keypoints: list = field(default_factory=list)  # cv2.KeyPoint
    descriptors: np.ndarray = None  # (N, D) aligned with keypoints
    matches: list = field(default_factory=list)  # cv2.DMatch against the previous frame


@dataclass
class MetricRecord:
    detector: str
    t_detect: float  # ms
    keypoints: int
    descriptor: str
    t_extract: float  # ms
    matches: int = 0
    t_match: float = 0.0  # ms

    def as_row(self) -> list:
        return [
            self.detector,
            f"{self.t_detect:.6g}",
            self.keypoints,
            self.descriptor,
            f"{self.t_extract:.6g}",
            self.matches,
            f"{self.t_match:.6g}",
        ]


@dataclass
class PairResult:
    detector: str
    descriptor: str
    records: list = field(default_factory=list)  # MetricRecord rows already written
    error: str = None
    skipped: bool = False

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def ok(self) -> bool:
        return not self.skipped and self.error is None


@dataclass
class SweepSummary:
    results: list  # PairResult
    output_path: str

    @property
    def error_count(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def rows_written(self) -> int:
        return sum(len(r.records) for r in self.results)
