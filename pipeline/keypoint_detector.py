import logging
import cv2
import numpy as np
from pipeline.errors import SweepError
from pipeline.timer import Timer

logger = logging.getLogger(__name__)


class KeypointDetector:
    """Named detection strategy: grayscale image -> list of cv2.KeyPoint"""

    def __init__(self, name: str):
        self.name = name

    def detect(self, image: np.ndarray) -> list:
        raise NotImplementedError

    def run(self, image: np.ndarray) -> tuple[list, float]:
        """Detect and return (keypoints, elapsed ms)"""
        with Timer(self.name) as t:
            keypoints = self.detect(image)
        logger.debug("%s detection with n=%d keypoints in %.3f ms", self.name, len(keypoints), t.elapsed_ms)
        return keypoints, t.elapsed_ms


class ShiTomasiDetector(KeypointDetector):
    def __init__(self, block_size: int = 4, max_overlap: float = 0.0,
                 quality_level: float = 0.01, k: float = 0.04):
        super().__init__('SHITOMASI')
        self.block_size = block_size
        self.min_distance = (1.0 - max_overlap) * block_size
        self.quality_level = quality_level
        self.k = k

    def detect(self, image: np.ndarray) -> list:
        # max. number of keypoints scales with image area
        max_corners = int(image.shape[0] * image.shape[1] / max(1.0, self.min_distance))
        corners = cv2.goodFeaturesToTrack(
            image, max_corners, self.quality_level, self.min_distance,
            mask=None, blockSize=self.block_size, useHarrisDetector=False, k=self.k
        )
        if corners is None:
            return []
        return [cv2.KeyPoint(float(x), float(y), float(self.block_size)) for x, y in corners.reshape(-1, 2)]


def suppress_non_maxima(candidates, max_overlap: float = 0.0) -> list:
    """
    Greedy overlap-based non-maximum suppression.

    Each candidate is compared against the keypoints accepted so far. The first
    overlapping keypoint with a lower response is replaced in place; a candidate
    that overlaps but never wins is dropped, one that overlaps nothing is kept.
    """
    keypoints = []
    for candidate in candidates:
        overlapped = False
        for i, kp in enumerate(keypoints):
            if cv2.KeyPoint.overlap(candidate, kp) > max_overlap:
                overlapped = True
                if candidate.response > kp.response:
                    keypoints[i] = candidate
                    break
        if not overlapped:
            keypoints.append(candidate)
    return keypoints


class HarrisDetector(KeypointDetector):
    def __init__(self, block_size: int = 2, aperture_size: int = 3,
                 min_response: int = 100, k: float = 0.04, max_overlap: float = 0.0):
        super().__init__('HARRIS')
        self.block_size = block_size
        self.aperture_size = aperture_size
        self.min_response = min_response  # on the 0..255 normalised response
        self.k = k
        self.max_overlap = max_overlap

    def response_map(self, image: np.ndarray) -> np.ndarray:
        dst = cv2.cornerHarris(image, self.block_size, self.aperture_size, self.k)
        dst_norm = cv2.normalize(dst, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_32F)
        return dst_norm.astype(np.int32)

    def detect(self, image: np.ndarray) -> list:
        response = self.response_map(image)
        ys, xs = np.nonzero(response > self.min_response)  # row-major
        size = 2.0 * self.aperture_size
        candidates = (
            cv2.KeyPoint(float(x), float(y), size, -1, float(response[y, x]))
            for y, x in zip(ys, xs)
        )
        return suppress_non_maxima(candidates, self.max_overlap)


class OpenCVDetector(KeypointDetector):
    """Thin wrapper around a cv2.Feature2D used for detection only"""

    def __init__(self, name: str, feature2d):
        super().__init__(name)
        self.feature2d = feature2d

    def detect(self, image: np.ndarray) -> list:
        return list(self.feature2d.detect(image, None))


def make_fast():
    return cv2.FastFeatureDetector_create(
        threshold=30, nonmaxSuppression=True, type=cv2.FAST_FEATURE_DETECTOR_TYPE_9_16
    )


def make_brisk():
    return cv2.BRISK_create(thresh=30, octaves=3, patternScale=1.0)


def make_orb():
    return cv2.ORB_create(
        nfeatures=500, scaleFactor=1.2, nlevels=8, edgeThreshold=31, firstLevel=0,
        WTA_K=2, scoreType=cv2.ORB_HARRIS_SCORE, patchSize=31, fastThreshold=20
    )


def make_akaze():
    return cv2.AKAZE_create(
        descriptor_type=cv2.AKAZE_DESCRIPTOR_MLDB, descriptor_size=0, descriptor_channels=3,
        threshold=0.001, nOctaves=4, nOctaveLayers=4, diffusivity=cv2.KAZE_DIFF_PM_G2
    )


def make_sift():
    return cv2.SIFT_create(nfeatures=0, nOctaveLayers=3, contrastThreshold=0.04, edgeThreshold=10, sigma=1.6)


MODERN_DETECTORS = {
    'FAST': make_fast,
    'BRISK': make_brisk,
    'ORB': make_orb,
    'AKAZE': make_akaze,
    'SIFT': make_sift,
}

DETECTOR_NAMES = ('SHITOMASI', 'HARRIS') + tuple(MODERN_DETECTORS)


def build_feature2d(name: str, factory):
    """Instantiate an OpenCV algorithm, reporting builds that do not ship it as a SweepError"""
    try:
        return factory()
    except AttributeError as e:
        raise SweepError(f"OpenCV build does not provide {name}: {e}") from e


def create_detector(name: str) -> KeypointDetector:
    if name == 'SHITOMASI':
        return ShiTomasiDetector()
    if name == 'HARRIS':
        return HarrisDetector()
    if name in MODERN_DETECTORS:
        return OpenCVDetector(name, build_feature2d(name, MODERN_DETECTORS[name]))
    raise ValueError(f"Unknown detector: {name}. Use one of {', '.join(DETECTOR_NAMES)}")


def retain_best(keypoints: list, max_keypoints: int, detector_name: str = None) -> list:
    """Limit a keypoint list to the `max_keypoints` strongest responses"""
    if detector_name == 'SHITOMASI':
        # no response info, corners already come in descending quality order
        return keypoints[:max_keypoints]
    if len(keypoints) <= max_keypoints:
        return keypoints
    return sorted(keypoints, key=lambda kp: kp.response, reverse=True)[:max_keypoints]
