from dataclasses import dataclass


@dataclass(frozen=True)
class Region:
    """Axis-aligned rectangle, bounds inclusive on both ends"""
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @classmethod
    def from_rect(cls, x: float, y: float, width: float, height: float) -> 'Region':
        return cls(x_min=x, y_min=y, x_max=x + width, y_max=y + height)

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


def filter_keypoints(keypoints: list, region: Region) -> list:
    """Keep the keypoints whose position lies inside `region`, preserving order"""
    return [kp for kp in keypoints if region.contains(kp.pt[0], kp.pt[1])]
