import logging
from enum import Enum
import cv2
import numpy as np
import torch
from kornia.feature import match_nn, match_snn
from pipeline.descriptor_extractor import DescriptorClass
from pipeline.timer import Timer

logger = logging.getLogger(__name__)


class MatcherType(str, Enum):
    BF = 'MAT_BF'
    FLANN = 'MAT_FLANN'
    KORNIA = 'MAT_KORNIA'


class SelectorType(str, Enum):
    NN = 'SEL_NN'  # best match per source descriptor
    KNN = 'SEL_KNN'  # k=2 with descriptor distance ratio test


class FeatureMatcher:
    def __init__(self, matcher_type: str = 'MAT_BF', selector_type: str = 'SEL_KNN',
                 ratio: float = 0.8, device: str = 'cuda'):
        self.matcher_type = MatcherType(matcher_type)
        self.selector_type = SelectorType(selector_type)
        self.ratio = ratio
        self.device = device if torch.cuda.is_available() else 'cpu'

    def match(self, desc_source: np.ndarray, desc_ref: np.ndarray,
              descriptor_class: DescriptorClass) -> list:
        """
        Match source descriptors against reference descriptors.

        Returns a list of cv2.DMatch with queryIdx into the source and trainIdx
        into the reference set. Library failures are logged and yield whatever
        matches were collected so far (usually none).
        """
        if desc_source is None or desc_ref is None or len(desc_source) == 0 or len(desc_ref) == 0:
            return []
        # ratio test needs a second neighbour
        if self.selector_type == SelectorType.KNN and len(desc_ref) < 2:
            return []

        matches = []
        try:
            if self.matcher_type == MatcherType.KORNIA:
                matches = self._match_kornia(desc_source, desc_ref, descriptor_class)
            else:
                matches = self._match_opencv(desc_source, desc_ref, descriptor_class)
        except (cv2.error, RuntimeError) as e:
            logger.error(
                "Matcher error: %s | DescriptorType: %s | descSource: %s descRef: %s",
                e, descriptor_class.value, desc_source.dtype, desc_ref.dtype
            )
        return matches

    def run(self, desc_source: np.ndarray, desc_ref: np.ndarray,
            descriptor_class: DescriptorClass) -> tuple[list, float]:
        with Timer(self.matcher_type.value) as t:
            matches = self.match(desc_source, desc_ref, descriptor_class)
        logger.debug("%s with n=%d matches in %.3f ms", self.matcher_type.value, len(matches), t.elapsed_ms)
        return matches, t.elapsed_ms

    def _create_opencv_matcher(self, descriptor_class: DescriptorClass):
        if self.matcher_type == MatcherType.BF:
            norm = cv2.NORM_L1 if descriptor_class == DescriptorClass.HOG else cv2.NORM_HAMMING
            return cv2.BFMatcher(norm, crossCheck=False)
        return cv2.FlannBasedMatcher()

    def _prepare(self, desc: np.ndarray, descriptor_class: DescriptorClass) -> np.ndarray:
        if self.matcher_type == MatcherType.FLANN:
            # FLANN's default KD-tree index only accepts float32
            return desc.astype(np.float32, copy=False)
        if descriptor_class == DescriptorClass.BINARY:
            return desc.astype(np.uint8, copy=False)
        return desc.astype(np.float32, copy=False)

    def _match_opencv(self, desc_source, desc_ref, descriptor_class) -> list:
        matcher = self._create_opencv_matcher(descriptor_class)
        src = self._prepare(desc_source, descriptor_class)
        ref = self._prepare(desc_ref, descriptor_class)

        if self.selector_type == SelectorType.NN:
            return list(matcher.match(src, ref))

        matches = []
        for neighbours in matcher.knnMatch(src, ref, k=2):
            if len(neighbours) < 2:
                continue
            best, second = neighbours[0], neighbours[1]
            if best.distance < self.ratio * second.distance:
                matches.append(best)
        return matches

    def _to_tensor(self, desc: np.ndarray, descriptor_class: DescriptorClass) -> torch.Tensor:
        if descriptor_class == DescriptorClass.BINARY:
            # L1 over unpacked bits equals the Hamming distance of the packed bytes
            desc = np.unpackbits(desc.astype(np.uint8, copy=False), axis=1)
        return torch.from_numpy(np.ascontiguousarray(desc)).float().to(self.device)

    def _match_kornia(self, desc_source, desc_ref, descriptor_class) -> list:
        desc0 = self._to_tensor(desc_source, descriptor_class)
        desc1 = self._to_tensor(desc_ref, descriptor_class)

        with torch.no_grad():
            dm = torch.cdist(desc0, desc1, p=1)
            if self.selector_type == SelectorType.NN:
                _, match_idxs = match_nn(desc0, desc1, dm=dm)
            else:
                # match_snn returns best/second ratios and keeps ratio <= th
                ratios, match_idxs = match_snn(desc0, desc1, th=self.ratio, dm=dm)
                match_idxs = match_idxs[ratios.view(-1) < self.ratio]
            dists = dm[match_idxs[:, 0], match_idxs[:, 1]]

        match_idxs = match_idxs.cpu().numpy()
        dists = dists.cpu().numpy()
        return [cv2.DMatch(int(q), int(t), float(d)) for (q, t), d in zip(match_idxs, dists)]
