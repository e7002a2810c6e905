"""
Offline visualization of keypoint matches between consecutive frames.
"""
from pathlib import Path
import cv2
import numpy as np
from data_classes.data_classes import Frame


def draw_matches(source: Frame, reference: Frame) -> np.ndarray:
    """Side-by-side image of both frames with their keypoints and the reference frame's matches"""
    return cv2.drawMatches(
        source.image, source.keypoints,
        reference.image, reference.keypoints,
        reference.matches, None,
        flags=cv2.DrawMatchesFlags_DRAW_RICH_KEYPOINTS,
    )


def save_match_image(source: Frame, reference: Frame, output_dir: str,
                     detector: str, descriptor: str) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{detector}_{descriptor}_{reference.idx:04d}.png"
    cv2.imwrite(str(path), draw_matches(source, reference))
    return path
