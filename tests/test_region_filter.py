import cv2

from pipeline.region_filter import Region, filter_keypoints


def _kp(x: float, y: float) -> cv2.KeyPoint:
    return cv2.KeyPoint(float(x), float(y), 4.0)


def test_from_rect_matches_vehicle_box() -> None:
    region = Region.from_rect(535, 180, 180, 150)
    assert (region.x_min, region.y_min, region.x_max, region.y_max) == (535, 180, 715, 330)


def test_bounds_are_inclusive() -> None:
    region = Region(10, 20, 30, 40)
    kps = [_kp(10, 20), _kp(30, 40), _kp(9.99, 25), _kp(20, 40.01), _kp(30, 20)]
    kept = filter_keypoints(kps, region)
    assert [kp.pt for kp in kept] == [(10, 20), (30, 40), (30, 20)]


def test_order_is_preserved() -> None:
    region = Region.from_rect(0, 0, 100, 100)
    kps = [_kp(50, 50), _kp(200, 5), _kp(1, 99), _kp(75, 3)]
    kept = filter_keypoints(kps, region)
    assert [kp.pt for kp in kept] == [(50, 50), (1, 99), (75, 3)]


def test_filter_is_idempotent() -> None:
    region = Region.from_rect(535, 180, 180, 150)
    kps = [_kp(x, y) for x in range(500, 760, 13) for y in range(150, 360, 17)]
    once = filter_keypoints(kps, region)
    twice = filter_keypoints(once, region)
    assert 0 < len(once) < len(kps)
    assert [kp.pt for kp in twice] == [kp.pt for kp in once]


def test_empty_input() -> None:
    assert filter_keypoints([], Region(0, 0, 1, 1)) == []
