"""
Keypoint detector / descriptor benchmark pipeline.

Submodules:
- frame_loader: Read an indexed image sequence as grayscale frames
- frame_buffer: Fixed-capacity ring buffer of recent frames
- region_filter: Restrict keypoints to a rectangular region of interest
- keypoint_detector: SHITOMASI, HARRIS and OpenCV feature detectors
- descriptor_extractor: Binary and gradient-histogram descriptors
- feature_matcher: Brute-force / FLANN / kornia matching with NN or ratio-test selection
- compatibility: Known-bad detector/descriptor combinations
- reporter: Per-frame CSV output and summary tables
- sweep: Detector x descriptor sweep controller
- visualize: Match images written to disk
- timer: Millisecond timing helpers
"""

from .errors import SweepError, FrameLoadError
from .frame_loader import FrameLoader
from .frame_buffer import FrameBuffer
from .region_filter import Region, filter_keypoints
from .keypoint_detector import (
    KeypointDetector,
    create_detector,
    suppress_non_maxima,
    retain_best,
    DETECTOR_NAMES,
)
from .descriptor_extractor import (
    DescriptorExtractor,
    DescriptorClass,
    create_extractor,
    descriptor_class,
)
from .feature_matcher import FeatureMatcher, MatcherType, SelectorType
from .compatibility import is_compatible, compatible_pairs, all_pairs
from .reporter import CsvReporter, summarize
from .sweep import SweepController

__all__ = [
    # Errors
    'SweepError',
    'FrameLoadError',
    # Frames
    'FrameLoader',
    'FrameBuffer',
    # Keypoints
    'Region',
    'filter_keypoints',
    'KeypointDetector',
    'create_detector',
    'suppress_non_maxima',
    'retain_best',
    'DETECTOR_NAMES',
    # Descriptors
    'DescriptorExtractor',
    'DescriptorClass',
    'create_extractor',
    'descriptor_class',
    # Matching
    'FeatureMatcher',
    'MatcherType',
    'SelectorType',
    # Sweep
    'is_compatible',
    'compatible_pairs',
    'all_pairs',
    'CsvReporter',
    'summarize',
    'SweepController',
]
