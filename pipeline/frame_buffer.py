from collections import deque
from data_classes.data_classes import Frame


class FrameBuffer:
    """Ring buffer holding the most recent `capacity` frames in push order.

    The buffer has no error state of its own: callers check `len(buffer)`
    before asking for `previous`.
    """

    def __init__(self, capacity: int = 2):
        if capacity < 1:
            raise ValueError(f"Buffer capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._frames = deque()

    def push(self, frame: Frame) -> None:
        """Append a frame, evicting the oldest one when the buffer is full"""
        if len(self._frames) == self.capacity:
            self._frames.popleft()
        self._frames.append(frame)

    def clear(self) -> None:
        self._frames.clear()

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self):
        return iter(self._frames)

    @property
    def frames(self) -> list[Frame]:
        return list(self._frames)

    @property
    def latest(self) -> Frame:
        return self._frames[-1]

    @property
    def previous(self) -> Frame:
        return self._frames[-2]
