import logging
from enum import Enum
import cv2
import numpy as np
from pipeline.timer import Timer
from pipeline import keypoint_detector

logger = logging.getLogger(__name__)


class DescriptorClass(str, Enum):
    BINARY = 'DES_BINARY'  # Hamming distance
    HOG = 'DES_HOG'  # gradient histograms, L1 distance


DESCRIPTOR_CLASSES = {
    'BRISK': DescriptorClass.BINARY,
    'BRIEF': DescriptorClass.BINARY,
    'ORB': DescriptorClass.BINARY,
    'FREAK': DescriptorClass.BINARY,
    'AKAZE': DescriptorClass.BINARY,
    'SIFT': DescriptorClass.HOG,
}


def descriptor_class(name: str) -> DescriptorClass:
    try:
        return DESCRIPTOR_CLASSES[name]
    except KeyError:
        raise ValueError(f"Unknown descriptor: {name}") from None


def make_brief():
    return cv2.xfeatures2d.BriefDescriptorExtractor_create(bytes=32, use_orientation=False)


def make_freak():
    return cv2.xfeatures2d.FREAK_create(
        orientationNormalized=True, scaleNormalized=True, patternScale=22.0, nOctaves=4
    )


EXTRACTOR_FACTORIES = {
    'BRISK': keypoint_detector.make_brisk,
    'BRIEF': make_brief,
    'ORB': keypoint_detector.make_orb,
    'FREAK': make_freak,
    'AKAZE': keypoint_detector.make_akaze,
    'SIFT': keypoint_detector.make_sift,
}


class DescriptorExtractor:
    """Named description strategy: (image, keypoints) -> index-aligned descriptors"""

    def __init__(self, name: str):
        if name not in EXTRACTOR_FACTORIES:
            raise ValueError(f"Unknown descriptor: {name}. Use one of {', '.join(EXTRACTOR_FACTORIES)}")
        self.name = name
        self.descriptor_class = DESCRIPTOR_CLASSES[name]
        self.extractor = keypoint_detector.build_feature2d(name, EXTRACTOR_FACTORIES[name])

    def extract(self, image: np.ndarray, keypoints: list) -> tuple[list, np.ndarray]:
        """
        Compute descriptors for `keypoints`.

        OpenCV drops keypoints it cannot describe (e.g. too close to the border),
        so the returned keypoint list replaces the input one to keep rows aligned.
        """
        keypoints, descriptors = self.extractor.compute(image, keypoints)
        return list(keypoints), descriptors

    def run(self, image: np.ndarray, keypoints: list) -> tuple[list, np.ndarray, float]:
        with Timer(self.name) as t:
            keypoints, descriptors = self.extract(image, keypoints)
        logger.debug("%s descriptor extraction in %.3f ms", self.name, t.elapsed_ms)
        return keypoints, descriptors, t.elapsed_ms


def create_extractor(name: str) -> DescriptorExtractor:
    return DescriptorExtractor(name)
