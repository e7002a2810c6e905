import logging
import cv2
from data_classes.data_classes import Frame
from pipeline.errors import FrameLoadError

logger = logging.getLogger(__name__)


class FrameLoader:
    def __init__(self, base_path: str, prefix: str = '', extension: str = '.png',
                 start: int = 0, end: int = 0, fill_width: int = 4):
        if end < start:
            raise ValueError(f"Empty index range: [{start}, {end}]")
        self.base_path = base_path
        self.prefix = prefix
        self.extension = extension
        self.start = start
        self.end = end  # inclusive
        self.fill_width = fill_width

    @classmethod
    def from_config(cls, config) -> 'FrameLoader':
        return cls(
            base_path=config.img_base_path,
            prefix=config.img_prefix,
            extension=config.img_file_type,
            start=config.img_start_index,
            end=config.img_end_index,
            fill_width=config.img_fill_width,
        )

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __iter__(self):
        for index in range(self.start, self.end + 1):
            yield self.load(index)

    def frame_path(self, index: int) -> str:
        """Full filename for a sequence index, e.g. images/img_0003.png"""
        return f"{self.base_path}{self.prefix}{index:0{self.fill_width}d}{self.extension}"

    def load(self, index: int) -> Frame:
        """Read one frame from disk and convert it to grayscale"""
        path = self.frame_path(index)
        img = cv2.imread(path)
        if img is None:
            raise FrameLoadError(path)

        logger.debug("Loaded %s (%dx%d)", path, img.shape[1], img.shape[0])
        return Frame(image=cv2.cvtColor(img, cv2.COLOR_BGR2GRAY), idx=index, path=path)
