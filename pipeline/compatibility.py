"""
Known-bad (detector, descriptor) combinations.

AKAZE descriptors need the octave/class information only the AKAZE detector
writes into its keypoints, and ORB cannot describe keypoints from SIFT's
octave layout.
"""

AKAZE_ONLY_DESCRIPTORS = frozenset({'AKAZE'})

EXCLUDED_PAIRS = frozenset({
    ('SIFT', 'ORB'),
})


def is_compatible(detector: str, descriptor: str) -> bool:
    if descriptor in AKAZE_ONLY_DESCRIPTORS and detector != 'AKAZE':
        return False
    return (detector, descriptor) not in EXCLUDED_PAIRS


def all_pairs(detectors, descriptors) -> list[tuple[str, str]]:
    """Detector-major cross product"""
    return [(det, desc) for det in detectors for desc in descriptors]


def compatible_pairs(detectors, descriptors) -> list[tuple[str, str]]:
    return [(det, desc) for det, desc in all_pairs(detectors, descriptors) if is_compatible(det, desc)]
