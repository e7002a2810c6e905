"""
Detector x descriptor sweep.

For every compatible pair the frame sequence is replayed through
load -> buffer -> detect -> ROI filter -> describe -> match (from the second
frame on) -> report. A library failure abandons the rest of that pair only.
"""
import logging
import cv2
from tqdm import tqdm
from data_classes.data_classes import Config, Frame, MetricRecord, PairResult, SweepSummary
from pipeline.compatibility import all_pairs, is_compatible
from pipeline.descriptor_extractor import EXTRACTOR_FACTORIES, DescriptorExtractor, create_extractor
from pipeline.errors import SweepError
from pipeline.feature_matcher import FeatureMatcher
from pipeline.frame_buffer import FrameBuffer
from pipeline.frame_loader import FrameLoader
from pipeline.keypoint_detector import DETECTOR_NAMES, KeypointDetector, create_detector, retain_best
from pipeline.region_filter import Region, filter_keypoints
from pipeline.reporter import CsvReporter
from pipeline.visualize import save_match_image

logger = logging.getLogger(__name__)


class SweepController:
    def __init__(self, config: Config, loader: FrameLoader = None, matcher: FeatureMatcher = None):
        unknown = [d for d in config.detectors if d not in DETECTOR_NAMES]
        unknown += [d for d in config.descriptors if d not in EXTRACTOR_FACTORIES]
        if unknown:
            raise ValueError(f"Unknown detector/descriptor names: {', '.join(unknown)}")

        self.config = config
        self.loader = loader or FrameLoader.from_config(config)
        self.matcher = matcher or FeatureMatcher(
            matcher_type=config.matcher_type,
            selector_type=config.selector_type,
            device=config.device,
        )
        self.region = Region.from_rect(*config.roi) if config.focus_on_roi else None

    def run(self, reporter: CsvReporter = None, progress: bool = True) -> SweepSummary:
        reporter = reporter or CsvReporter(self.config.output_path)
        buffer = FrameBuffer(self.config.buffer_size)
        results = []

        with reporter:
            pairs = all_pairs(self.config.detectors, self.config.descriptors)
            for detector_name, descriptor_name in tqdm(pairs, desc="Sweeping", disable=not progress):
                if not is_compatible(detector_name, descriptor_name):
                    logger.debug("Skipping incompatible pair %s/%s", detector_name, descriptor_name)
                    results.append(PairResult(detector_name, descriptor_name, skipped=True))
                    continue
                results.append(self.run_pair(detector_name, descriptor_name, buffer, reporter))

        return SweepSummary(results=results, output_path=str(reporter.path))

    def run_pair(self, detector_name: str, descriptor_name: str,
                 buffer: FrameBuffer, reporter: CsvReporter) -> PairResult:
        """Run every frame through one (detector, descriptor) pair"""
        result = PairResult(detector_name, descriptor_name)
        buffer.clear()

        try:
            detector = create_detector(detector_name)
            extractor = create_extractor(descriptor_name)
            for frame in self.loader:
                record = self.process_frame(frame, buffer, detector, extractor)
                reporter.write(record)
                result.records.append(record)
        except (cv2.error, SweepError) as e:
            logger.error("Detector: %s\tDescriptor: %s\tError: %s", detector_name, descriptor_name, e)
            result.error = str(e)

        buffer.clear()
        return result

    def process_frame(self, frame: Frame, buffer: FrameBuffer,
                      detector: KeypointDetector, extractor: DescriptorExtractor) -> MetricRecord:
        buffer.push(frame)

        keypoints, t_detect = detector.run(frame.image)
        if self.region is not None:
            keypoints = filter_keypoints(keypoints, self.region)
        num_keypoints = len(keypoints)

        if self.config.max_keypoints:
            keypoints = retain_best(keypoints, self.config.max_keypoints, detector.name)

        frame.keypoints, frame.descriptors, t_extract = extractor.run(frame.image, keypoints)

        # first frame of a pair has nothing to match against: report 0 matches / 0 ms
        record = MetricRecord(
            detector=detector.name,
            t_detect=t_detect,
            keypoints=num_keypoints,
            descriptor=extractor.name,
            t_extract=t_extract,
        )

        if len(buffer) > 1:
            source, reference = buffer.previous, buffer.latest
            reference.matches, record.t_match = self.matcher.run(
                source.descriptors, reference.descriptors, extractor.descriptor_class
            )
            record.matches = len(reference.matches)

            if self.config.vis_dir:
                save_match_image(source, reference, self.config.vis_dir, detector.name, extractor.name)

        logger.debug(
            "frame %d: %s/%s keypoints=%d matches=%d",
            frame.idx, detector.name, extractor.name, num_keypoints, record.matches
        )
        return record
