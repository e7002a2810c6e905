import time


class Timer:
    """Context manager measuring wall-clock time of a block in milliseconds"""

    def __init__(self, name: str = None):
        self.name = name
        self.start = None
        self.elapsed_ms = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = (time.perf_counter() - self.start) * 1000.0


def timeit(name: str):
    """Timer that reports the block duration when it exits"""
    class _Reporting(Timer):
        def __exit__(self, *args):
            super().__exit__(*args)
            print(f"{self.name}: {self.elapsed_ms / 1000.0:.2f}s")
    return _Reporting(name)
