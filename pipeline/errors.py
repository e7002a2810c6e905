class SweepError(Exception):
    """Base class for failures raised by the sweep harness itself"""


class FrameLoadError(SweepError):
    """An input frame could not be read or decoded"""

    def __init__(self, path: str):
        super().__init__(f"Could not read image: {path}")
        self.path = path
